"""
Layout engine for embedded pages

Pure functions: given page sizes and a LayoutRequest, compute where every
selected page goes and emit the instructions that paint it. Nothing here
touches a document; the embedder owns the document side and the resource
name counter.

Pipeline:
1. resolve_scale: requested scale clamped by max width, then max height
2. compute_placements: strategy offsets from the base position
3. emit_operations: q / cm / Do / Q per page, optionally clipped as a whole
"""

from typing import List, Optional, Sequence, Tuple

from ..errors import PageNotFoundError
from ..operations import Operation, name, op
from ..utilities import Print
from .base import LayoutRequest, PageGeometry, PagePlacement, Rect, Scale


def resolve_scale(geometry: PageGeometry, request: LayoutRequest) -> Scale:
    """
    Compute the final scale for one page under the request's constraints.

    The width constraint is applied before the height constraint. With
    preserve_aspect_ratio, each clamp is copied to the other axis, so when
    both constraints are set the height clamp has the last word.

    Args:
        geometry: Unscaled page size
        request: Requested scale, max_width/max_height and aspect policy

    Returns:
        (scale_x, scale_y)
    """
    scale_x, scale_y = request.scale

    if request.max_width is not None:
        scale_x = min(scale_x, request.max_width / geometry.width)
        if request.preserve_aspect_ratio:
            scale_y = scale_x

    if request.max_height is not None:
        scale_y = min(scale_y, request.max_height / geometry.height)
        if request.preserve_aspect_ratio:
            scale_x = scale_y

    return scale_x, scale_y


def compute_placements(
    request: LayoutRequest,
    geometries: Sequence[PageGeometry]
) -> List[PagePlacement]:
    """
    Place every selected page.

    Args:
        request: Layout request with the already-selected pages
        geometries: Size of every source page, indexed by page number

    Returns:
        One PagePlacement per selected page, in selection order

    Raises:
        PageNotFoundError: If a selected index is outside the source document.
                           Raised before any placement is returned.
    """
    strategy = request.strategy
    base_x, base_y = request.base_position

    placements = []
    prior_sizes: List[Tuple[float, float]] = []

    for index, page_index in enumerate(request.selected_pages):
        if page_index < 0 or page_index >= len(geometries):
            raise PageNotFoundError(page_index, len(geometries))

        geometry = geometries[page_index]
        scale_x, scale_y = strategy.resolve_scale(index, geometry, request)
        scaled_size = (geometry.width * scale_x, geometry.height * scale_y)

        dx, dy = strategy.offset(index, geometry, scaled_size, prior_sizes)

        placements.append(PagePlacement(page_index, base_x + dx, base_y + dy, scale_x, scale_y))
        prior_sizes.append(scaled_size)

    Print("DEBUG", f"Placed {len(placements)} page{'s' if len(placements) != 1 else ''} with '{strategy.name}' layout")
    return placements


def placement_operations(resource_name: str, placement: PagePlacement, rotation: float = 0.0) -> List[Operation]:
    """
    Instructions painting one XObject at a placement.

    Returns:
        [q, cm a b c d e f, /name Do, Q]
    """
    return [
        op('q'),
        placement.transform(rotation).to_operation(),
        op('Do', name(resource_name)),
        op('Q'),
    ]


def clip_operations(clip_region: Rect) -> List[Operation]:
    """
    Start a clipped section: [q, x y w h re, W, n].

    The caller closes it with a single Q.
    """
    x, y, width, height = clip_region
    return [
        op('q'),
        op('re', x, y, width, height),
        op('W'),
        op('n'),
    ]


def emit_operations(
    request: LayoutRequest,
    named_placements: Sequence[Tuple[str, PagePlacement]]
) -> List[Operation]:
    """
    Emit the full instruction sequence for one embed call.

    The clip region, when set, wraps all placements once rather than each
    page. Opacity is carried on the request but not painted.

    Args:
        request: The layout request (rotation, opacity, clip_region)
        named_placements: (XObject resource name, placement) pairs

    Returns:
        Content stream instructions
    """
    if request.opacity < 1.0 and named_placements:
        Print("WARNING", f"Opacity {request.opacity:.2f} is recorded but not applied to embedded pages")

    operations: List[Operation] = []
    clip_region: Optional[Rect] = request.clip_region

    if clip_region is not None:
        operations.extend(clip_operations(clip_region))

    for resource_name, placement in named_placements:
        operations.extend(placement_operations(resource_name, placement, request.rotation))

    if clip_region is not None:
        operations.append(op('Q'))

    return operations
