"""
PDF embedding for hipdf

Loads source PDFs through pikepdf, imports their pages into a target
document as Form XObjects and places them with the layout engine.

Embedding a page:
1. Resolve the source by identifier (SourceNotLoadedError if unknown)
2. Select pages (page range, then layout filtering)
3. Compute placements (PageNotFoundError for bad indices, before any write)
4. Import each placed page: MediaBox -> /BBox, resources copied into
   the target, content decoded and flattened into a new stream
5. Emit q / cm / Do / Q per page under fresh names XO1, XO2, ...

The embedder does not touch the target page. The returned EmbedResult
holds the instructions and the XObjects; EmbedResult.apply() attaches
them to a page.
"""

import io
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pikepdf

from ..errors import SourceNotLoadedError
from ..operations import Operation, append_content, name, resource_dictionary
from ..utilities import Print
from . import get_layout
from .base import DEFAULT_PAGE_HEIGHT, DEFAULT_PAGE_WIDTH, LayoutRequest, LayoutStrategy, PageGeometry, Rect
from .engine import compute_placements, emit_operations
from .layouts import FirstOnly
from .selection import PageRange, select_pages

IDENTITY_MATRIX = [1, 0, 0, 1, 0, 0]


@dataclass
class EmbedOptions:
    """
    Options for one embed call. Every with_* method returns self.

    Attributes:
        position: (x, y) base position in the target page
        scale: Requested (scale_x, scale_y)
        rotation: Degrees, counter-clockwise
        opacity: 0.0-1.0; recorded but not painted
        layout: LayoutStrategy for multi-page sources
        max_width: Upper bound on scaled width, or None
        max_height: Upper bound on scaled height, or None
        preserve_aspect_ratio: Copy a size clamp to the other axis
        clip_bounds: (x, y, width, height) clip around all pages, or None
        page_range: Pages to consider; None means all
    """
    position: Tuple[float, float] = (0.0, 0.0)
    scale: Tuple[float, float] = (1.0, 1.0)
    rotation: float = 0.0
    opacity: float = 1.0
    layout: LayoutStrategy = field(default_factory=FirstOnly)
    max_width: Optional[float] = None
    max_height: Optional[float] = None
    preserve_aspect_ratio: bool = True
    clip_bounds: Optional[Rect] = None
    page_range: Optional[PageRange] = None

    @classmethod
    def from_config(cls, config: dict) -> "EmbedOptions":
        """
        Options with the layout named in the 'embedding' configuration section.

        Args:
            config: 'embedding' section with keys:
                - layout: str - registered layout name
                - layouts: dict - per-layout settings keyed by layout name
        """
        layout_name = config.get('layout', 'first_page')
        layout_config = config.get('layouts', {}).get(layout_name, {})
        return cls(layout=get_layout(layout_name, layout_config))

    def at_position(self, x: float, y: float) -> "EmbedOptions":
        self.position = (x, y)
        return self

    def with_scale(self, scale: float) -> "EmbedOptions":
        self.scale = (scale, scale)
        return self

    def with_scale_xy(self, scale_x: float, scale_y: float) -> "EmbedOptions":
        self.scale = (scale_x, scale_y)
        return self

    def with_rotation(self, degrees: float) -> "EmbedOptions":
        self.rotation = degrees
        return self

    def with_opacity(self, opacity: float) -> "EmbedOptions":
        self.opacity = max(0.0, min(1.0, opacity))
        return self

    def with_layout(self, layout: LayoutStrategy) -> "EmbedOptions":
        self.layout = layout
        return self

    def with_max_size(self, width: float, height: float) -> "EmbedOptions":
        self.max_width = width
        self.max_height = height
        return self

    def with_clip_bounds(self, x: float, y: float, width: float, height: float) -> "EmbedOptions":
        self.clip_bounds = (x, y, width, height)
        return self

    def with_page_range(self, page_range: PageRange) -> "EmbedOptions":
        self.page_range = page_range
        return self

    def with_aspect_ratio(self, preserve: bool) -> "EmbedOptions":
        self.preserve_aspect_ratio = preserve
        return self

    def to_request(self, selected_pages) -> LayoutRequest:
        """Freeze these options into a LayoutRequest for the given pages."""
        return LayoutRequest(
            selected_pages=tuple(selected_pages),
            strategy=self.layout,
            base_position=self.position,
            scale=self.scale,
            max_width=self.max_width,
            max_height=self.max_height,
            preserve_aspect_ratio=self.preserve_aspect_ratio,
            rotation=self.rotation,
            opacity=self.opacity,
            clip_region=self.clip_bounds,
        )


@dataclass
class EmbeddedPdfInfo:
    """Facts about a loaded source PDF."""
    page_count: int
    page_dimensions: List[Tuple[float, float]]
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class EmbedResult:
    """
    Output of an embed call.

    Attributes:
        operations: Content stream instructions to append to a page
        xobject_resources: Resource name (without slash) -> indirect Form XObject
    """
    operations: List[Operation] = field(default_factory=list)
    xobject_resources: Dict[str, pikepdf.Object] = field(default_factory=dict)

    def extend(self, other: "EmbedResult") -> None:
        self.operations.extend(other.operations)
        self.xobject_resources.update(other.xobject_resources)

    def apply(self, pdf: pikepdf.Pdf, page: pikepdf.Page) -> None:
        """
        Register the XObjects in the page's /Resources /XObject dictionary
        and append the instructions to its content.
        """
        if self.xobject_resources:
            xobjects = resource_dictionary(page, 'XObject')
            for resource_name, xobject in self.xobject_resources.items():
                xobjects[name(resource_name)] = xobject
        append_content(pdf, page, self.operations)


def _number(value, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return default
    return float(value)


def _inherited(page_obj: pikepdf.Dictionary, key: str):
    """Look up an inheritable page attribute on the page, then its ancestors."""
    node = page_obj
    visited = set()
    while isinstance(node, pikepdf.Dictionary):
        if key in node:
            return node[key]
        if node.is_indirect:
            if node.objgen in visited:
                break
            visited.add(node.objgen)
        node = node.get('/Parent')
    return None


def page_box(
    page_obj: pikepdf.Dictionary,
    default_size: Tuple[float, float] = (DEFAULT_PAGE_WIDTH, DEFAULT_PAGE_HEIGHT)
) -> Rect:
    """
    The page's MediaBox as (x1, y1, x2, y2).

    Non-numeric coordinates fall back individually (x1, y1 to 0; x2, y2 to
    the default size). A missing, short or zero-area box gives
    (0, 0, default width, default height).
    """
    default_width, default_height = default_size
    default_box = (0.0, 0.0, float(default_width), float(default_height))

    box = _inherited(page_obj, '/MediaBox')
    if not isinstance(box, pikepdf.Array) or len(box) < 4:
        return default_box

    x1 = _number(box[0], 0.0)
    y1 = _number(box[1], 0.0)
    x2 = _number(box[2], float(default_width))
    y2 = _number(box[3], float(default_height))

    if x1 == x2 or y1 == y2:
        return default_box
    return x1, y1, x2, y2


def page_geometry(page_obj: pikepdf.Dictionary, default_size=(DEFAULT_PAGE_WIDTH, DEFAULT_PAGE_HEIGHT)) -> PageGeometry:
    x1, y1, x2, y2 = page_box(page_obj, default_size)
    return PageGeometry(abs(x2 - x1), abs(y2 - y1))


class PdfEmbedder:
    """
    Caches source PDFs and embeds their pages into target documents.

    Resource names (XO1, XO2, ...) keep increasing across calls on the same
    embedder, so results from several calls can share one page.
    """

    def __init__(self, config: Optional[dict] = None):
        """
        Args:
            config: Optional 'embedding' configuration section with keys:
                - resource_prefix: str - XObject name prefix (default 'XO')
                - default_page_size: [width, height] for pages without a usable MediaBox
        """
        config = config or {}
        self.resource_prefix = config.get('resource_prefix', 'XO')
        self.default_page_size = tuple(config.get('default_page_size', (DEFAULT_PAGE_WIDTH, DEFAULT_PAGE_HEIGHT)))

        self.resource_counter = 0
        self._sources: Dict[str, Tuple[pikepdf.Pdf, EmbeddedPdfInfo]] = {}

    def __enter__(self) -> "PdfEmbedder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def load_pdf(self, path: Union[str, Path]) -> str:
        """
        Load a PDF file for embedding. Loading the same path twice is a no-op.

        Args:
            path: Path to the PDF file

        Returns:
            Identifier to pass to embed_pdf() (the path as a string)

        Raises:
            FileNotFoundError: If the file does not exist
            RuntimeError: If pikepdf cannot parse the file
        """
        identifier = str(path)
        if identifier in self._sources:
            return identifier

        if not Path(path).exists():
            raise FileNotFoundError(f"PDF file not found: {path}")

        try:
            source = pikepdf.open(path)
        except pikepdf.PdfError as e:
            raise RuntimeError(f"Failed to load PDF {path}: {e}") from e

        self._register(identifier, source)
        return identifier

    def load_pdf_from_bytes(self, data: bytes, identifier: str) -> str:
        """
        Load a PDF held in memory under a caller-chosen identifier.

        An identifier that is already loaded is returned without parsing
        `data` again.

        Raises:
            RuntimeError: If pikepdf cannot parse the data
        """
        if identifier in self._sources:
            return identifier

        try:
            source = pikepdf.open(io.BytesIO(data))
        except pikepdf.PdfError as e:
            raise RuntimeError(f"Failed to load PDF from bytes ({identifier}): {e}") from e

        self._register(identifier, source)
        return identifier

    def _register(self, identifier: str, source: pikepdf.Pdf) -> None:
        info = self._extract_info(source)
        self._sources[identifier] = (source, info)
        Print("INFO", f"Loaded {identifier} ({info.page_count} page{'s' if info.page_count != 1 else ''})")

    def get_pdf_info(self, identifier: str) -> Optional[EmbeddedPdfInfo]:
        entry = self._sources.get(identifier)
        return entry[1] if entry is not None else None

    def is_loaded(self, identifier: str) -> bool:
        return identifier in self._sources

    def embed_pdf(self, target: pikepdf.Pdf, identifier: str, options: Optional[EmbedOptions] = None) -> EmbedResult:
        """
        Import the selected pages of a loaded source into `target`.

        Args:
            target: Document that receives the Form XObjects
            identifier: Value returned by load_pdf() / load_pdf_from_bytes()
            options: Placement options; defaults to EmbedOptions()

        Returns:
            EmbedResult with the instructions and the new XObjects

        Raises:
            SourceNotLoadedError: If identifier was never loaded
            PageNotFoundError: If a selected page does not exist in the source
        """
        entry = self._sources.get(identifier)
        if entry is None:
            raise SourceNotLoadedError(identifier)
        source, info = entry

        options = options or EmbedOptions()
        pages = select_pages(options.page_range, options.layout, info.page_count)
        request = options.to_request(pages)

        geometries = [PageGeometry(width, height) for width, height in info.page_dimensions]
        placements = compute_placements(request, geometries)

        result = EmbedResult()
        named_placements = []
        for placement in placements:
            self.resource_counter += 1
            resource_name = f"{self.resource_prefix}{self.resource_counter}"

            result.xobject_resources[resource_name] = self.import_page(target, source, placement.page_index)
            named_placements.append((resource_name, placement))

        result.operations = emit_operations(request, named_placements)

        Print("DEBUG", f"Embedded {len(placements)} page{'s' if len(placements) != 1 else ''} from {identifier}")
        return result

    def import_page(self, target: pikepdf.Pdf, source: pikepdf.Pdf, page_index: int) -> pikepdf.Object:
        """
        Copy one source page into `target` as an indirect Form XObject.

        The page's resources are copied into `target` so the result holds no
        references into `source`.
        """
        page_obj = source.pages[page_index].obj

        content = self._content_bytes(page_obj.get('/Contents'))

        source_resources = _inherited(page_obj, '/Resources')
        if isinstance(source_resources, pikepdf.Dictionary):
            resources = self._copy_resources(target, source_resources)
        else:
            resources = pikepdf.Dictionary()

        xobject = pikepdf.Stream(target, content)
        xobject.stream_dict[pikepdf.Name.Type] = pikepdf.Name.XObject
        xobject.stream_dict[pikepdf.Name.Subtype] = pikepdf.Name.Form
        xobject.stream_dict[pikepdf.Name.BBox] = pikepdf.Array(page_box(page_obj, self.default_page_size))
        xobject.stream_dict[pikepdf.Name.Resources] = resources
        xobject.stream_dict[pikepdf.Name.Matrix] = pikepdf.Array(IDENTITY_MATRIX)

        return target.make_indirect(xobject)

    def _content_bytes(self, contents) -> bytes:
        """Decoded page content; arrays are joined with a newline after each part."""
        if isinstance(contents, pikepdf.Array):
            return b''.join(self._content_bytes(part) + b'\n' for part in contents)

        if isinstance(contents, pikepdf.Stream):
            try:
                return contents.read_bytes()
            except pikepdf.PdfError as e:
                Print("WARNING", f"Could not decode page content, using empty content: {e}")
                return b''

        return b''

    def _copy_resources(self, target: pikepdf.Pdf, obj):
        """
        Copy a source object into `target`.

        Indirect objects go through Pdf.copy_foreign, which copies each
        source object once per target, so resources shared between pages
        (fonts, images) are written once and reference cycles terminate.
        Direct dictionaries and arrays are rebuilt around the copies.
        """
        if isinstance(obj, pikepdf.Object) and obj.is_indirect:
            return target.copy_foreign(obj)

        if isinstance(obj, pikepdf.Dictionary):
            return pikepdf.Dictionary({key: self._copy_resources(target, value) for key, value in obj.items()})

        if isinstance(obj, pikepdf.Array):
            return pikepdf.Array([self._copy_resources(target, item) for item in obj])

        return obj

    def _extract_info(self, source: pikepdf.Pdf) -> EmbeddedPdfInfo:
        page_dimensions = []
        for page in source.pages:
            geometry = page_geometry(page.obj, self.default_page_size)
            page_dimensions.append((geometry.width, geometry.height))

        metadata = {}
        docinfo = source.trailer.get('/Info')
        if isinstance(docinfo, pikepdf.Dictionary):
            for key, value in docinfo.items():
                if isinstance(value, pikepdf.String):
                    metadata[key.lstrip('/')] = str(value)

        return EmbeddedPdfInfo(len(source.pages), page_dimensions, metadata)

    def close(self) -> None:
        """Close every cached source document and forget them."""
        for source, _ in self._sources.values():
            source.close()
        self._sources.clear()
