"""
Optional Content Groups (layers) for hipdf

Layers let viewers toggle groups of content on and off. Using them takes
four steps:

1. Register layers on an OCGManager
2. initialize(pdf): creates one /OCG dictionary per layer plus /OCProperties
3. update_catalog(pdf): links /OCProperties from the document catalog
4. setup_page_resources(resources): exposes the layers to a page as
   /Properties L0, L1, ... so content can reference them with BDC /OC /L0

Optional content needs PDF 1.5; save with min_version=MIN_PDF_VERSION.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

import pikepdf

from .operations import Operation, name, op
from .utilities import Print

MIN_PDF_VERSION = "1.5"


@dataclass
class Layer:
    """
    A single Optional Content Group.

    Attributes:
        name: User-visible layer name
        default_visible: Whether the layer is ON when the document opens
        ocg: The indirect /OCG dictionary, set by OCGManager.initialize()
        tag: Resource tag used in content streams, set by setup_page_resources()
    """
    name: str
    default_visible: bool = True
    ocg: Optional[pikepdf.Object] = field(default=None, repr=False, compare=False)
    tag: Optional[str] = None

    def with_visibility(self, visible: bool) -> "Layer":
        self.default_visible = visible
        return self


@dataclass
class OCGConfig:
    """
    Document-wide optional content settings.

    Attributes:
        base_state: Initial state of unlisted layers ('ON', 'OFF' or '' to omit)
        create_panel_ui: Write /ListMode /AllPages so viewers show a layer panel
        intent: /Intent names, e.g. ['View', 'Design']
    """
    base_state: str = "ON"
    create_panel_ui: bool = True
    intent: List[str] = field(default_factory=lambda: ["View"])

    @classmethod
    def from_dict(cls, config: dict) -> "OCGConfig":
        """Build from the 'layers' configuration section."""
        return cls(
            base_state=config.get('base_state', 'ON'),
            create_panel_ui=config.get('create_panel_ui', True),
            intent=list(config.get('intent', ['View'])),
        )


class OCGManager:
    """Creates and tracks the layers of one document."""

    def __init__(self, config: Optional[OCGConfig] = None):
        self.config = config or OCGConfig()
        self.layers: List[Layer] = []
        self.oc_properties: Optional[pikepdf.Object] = None
        self._layer_index: Dict[str, int] = {}

    def add_layer(self, layer: Layer) -> int:
        """
        Add a layer.

        Returns:
            Index of the new layer. A later layer with the same name
            replaces the earlier one in name lookups.
        """
        index = len(self.layers)
        self._layer_index[layer.name] = index
        self.layers.append(layer)
        return index

    def get_layer(self, name: str) -> Optional[Layer]:
        index = self._layer_index.get(name)
        return self.layers[index] if index is not None else None

    def __len__(self) -> int:
        return len(self.layers)

    def is_empty(self) -> bool:
        return not self.layers

    def has_oc_properties(self) -> bool:
        return self.oc_properties is not None

    def initialize(self, pdf: pikepdf.Pdf) -> None:
        """
        Create OCG objects for every layer and the /OCProperties dictionary.

        Call after all layers have been added and before they are used.
        """
        for layer in self.layers:
            ocg = pikepdf.Dictionary(
                Type=pikepdf.Name.OCG,
                Name=pikepdf.String(layer.name),
            )
            layer.ocg = pdf.make_indirect(ocg)

        self._create_oc_properties(pdf)
        Print("DEBUG", f"Initialized {len(self.layers)} layer{'s' if len(self.layers) != 1 else ''}")

    def _require_initialized(self) -> None:
        if any(layer.ocg is None for layer in self.layers):
            raise RuntimeError("Layers not initialized. Call initialize() first.")

    def setup_page_resources(self, resources: pikepdf.Dictionary) -> Dict[str, str]:
        """
        Register every layer in a page's resources under /Properties.

        Args:
            resources: The page's /Resources dictionary

        Returns:
            Mapping from layer name to resource tag (L0, L1, ...)

        Raises:
            RuntimeError: If initialize() has not been called
        """
        self._require_initialized()

        properties = pikepdf.Dictionary()
        layer_map = {}

        for i, layer in enumerate(self.layers):
            tag = f"L{i}"
            properties[name(tag)] = layer.ocg
            layer.tag = tag
            layer_map[layer.name] = tag

        resources.Properties = properties
        return layer_map

    def update_catalog(self, pdf: pikepdf.Pdf) -> None:
        """Point the document catalog's /OCProperties at this manager's dictionary."""
        if self.oc_properties is not None:
            pdf.Root.OCProperties = self.oc_properties

    def _create_oc_properties(self, pdf: pikepdf.Pdf) -> None:
        ocg_refs = [layer.ocg for layer in self.layers]
        on_refs = [layer.ocg for layer in self.layers if layer.default_visible]
        off_refs = [layer.ocg for layer in self.layers if not layer.default_visible]

        default_dict = pikepdf.Dictionary(Order=pikepdf.Array(ocg_refs))

        if self.config.base_state:
            default_dict.BaseState = name(self.config.base_state)
        if on_refs:
            default_dict.ON = pikepdf.Array(on_refs)
        if off_refs:
            default_dict.OFF = pikepdf.Array(off_refs)
        if self.config.create_panel_ui:
            default_dict.ListMode = pikepdf.Name.AllPages

        oc_properties = pikepdf.Dictionary(
            OCGs=pikepdf.Array(ocg_refs),
            D=default_dict,
        )

        if self.config.intent:
            oc_properties.Intent = pikepdf.Array([name(intent) for intent in self.config.intent])

        self.oc_properties = pdf.make_indirect(oc_properties)


class LayerContentBuilder:
    """
    Builds a content stream whose parts are marked as belonging to layers.

    Only one layer is open at a time: beginning a new layer closes the
    current one, and build() closes whatever is still open.
    """

    def __init__(self):
        self._operations: List[Operation] = []
        self.current_layer: Optional[str] = None

    def begin_layer(self, layer_tag: str) -> "LayerContentBuilder":
        if self.current_layer is not None:
            self.end_layer()

        self._operations.append(op('BDC', pikepdf.Name.OC, name(layer_tag)))
        self.current_layer = layer_tag
        return self

    def end_layer(self) -> "LayerContentBuilder":
        if self.current_layer is not None:
            self._operations.append(op('EMC'))
            self.current_layer = None
        return self

    @contextmanager
    def layer(self, layer_tag: str) -> Iterator["LayerContentBuilder"]:
        """Context manager form of begin_layer()/end_layer()."""
        self.begin_layer(layer_tag)
        try:
            yield self
        finally:
            self.end_layer()

    def add_operation(self, operation: Operation) -> "LayerContentBuilder":
        self._operations.append(operation)
        return self

    def add_operations(self, operations: Iterable[Operation]) -> "LayerContentBuilder":
        self._operations.extend(operations)
        return self

    def build(self) -> List[Operation]:
        self.end_layer()
        return list(self._operations)


class LayerOperations:
    """Shorthand constructors for common drawing instructions."""

    @staticmethod
    def rectangle(x: float, y: float, width: float, height: float) -> Operation:
        return op('re', x, y, width, height)

    @staticmethod
    def fill() -> Operation:
        return op('f')

    @staticmethod
    def stroke() -> Operation:
        return op('S')

    @staticmethod
    def set_fill_color_rgb(r: float, g: float, b: float) -> Operation:
        return op('rg', r, g, b)

    @staticmethod
    def set_stroke_color_rgb(r: float, g: float, b: float) -> Operation:
        return op('RG', r, g, b)

    @staticmethod
    def set_fill_color_gray(gray: float) -> Operation:
        return op('g', gray)

    @staticmethod
    def begin_text() -> Operation:
        return op('BT')

    @staticmethod
    def end_text() -> Operation:
        return op('ET')

    @staticmethod
    def set_font(font_name: str, size: float) -> Operation:
        return op('Tf', name(font_name), size)

    @staticmethod
    def text_position(x: float, y: float) -> Operation:
        return op('Td', x, y)

    @staticmethod
    def show_text(text: str) -> Operation:
        return op('Tj', pikepdf.String(text))
