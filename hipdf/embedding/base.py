"""
Layout Strategy Protocol and layout data types for hipdf

Defines the contract that all multi-page layout strategies must implement,
and the values that flow through the layout engine.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

from ..transform import Transform

DEFAULT_PAGE_WIDTH = 595.0
DEFAULT_PAGE_HEIGHT = 842.0

Point = Tuple[float, float]
Scale = Tuple[float, float]
Size = Tuple[float, float]
Rect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class PageGeometry:
    """Unscaled size of one source page, in PDF points."""
    width: float = DEFAULT_PAGE_WIDTH
    height: float = DEFAULT_PAGE_HEIGHT


@dataclass(frozen=True)
class LayoutRequest:
    """
    Everything the engine needs to place one embed call's pages.

    Attributes:
        selected_pages: Source page indices (0-based) in placement order;
                        duplicates allowed
        base_position: (x, y) anchor in target coordinates
        scale: Requested (scale_x, scale_y)
        max_width: Upper bound on the scaled width, or None
        max_height: Upper bound on the scaled height, or None
        preserve_aspect_ratio: Propagate a clamp on one axis to the other
        strategy: LayoutStrategy deciding selection, scale and offsets
        rotation: Degrees, applied to every placed page
        opacity: 0.0-1.0; recorded only
        clip_region: (x, y, width, height) clip around all placements, or None
    """
    selected_pages: Tuple[int, ...]
    strategy: "LayoutStrategy"
    base_position: Point = (0.0, 0.0)
    scale: Scale = (1.0, 1.0)
    max_width: Optional[float] = None
    max_height: Optional[float] = None
    preserve_aspect_ratio: bool = True
    rotation: float = 0.0
    opacity: float = 1.0
    clip_region: Optional[Rect] = None


@dataclass(frozen=True)
class PagePlacement:
    """Where and how large one selected page is drawn."""
    page_index: int
    x: float
    y: float
    scale_x: float
    scale_y: float

    def transform(self, rotation: float = 0.0) -> Transform:
        return Transform(self.scale_x, self.scale_y, rotation, self.x, self.y)


class LayoutStrategy(Protocol):
    """
    Protocol for multi-page layout strategies.

    Strategies are responsible for:
    - Narrowing the page selection (e.g. first page only)
    - Choosing each page's scale
    - Offsetting each page from the request's base position
    """

    def select(self, pages: Sequence[int], total_pages: int) -> Sequence[int]:
        """
        Apply strategy-level filtering to the selected page indices.

        Args:
            pages: Indices produced by the page range
            total_pages: Page count of the source document

        Returns:
            Indices to place, in order (may be empty)
        """
        ...

    def resolve_scale(self, index: int, geometry: PageGeometry, request: LayoutRequest) -> Scale:
        """
        Final (scale_x, scale_y) for the index-th placed page.

        Args:
            index: Position within the selection (0-based)
            geometry: Unscaled size of the page
            request: The layout request (scale and size constraints)
        """
        ...

    def offset(
        self,
        index: int,
        geometry: PageGeometry,
        scaled_size: Size,
        prior_sizes: Sequence[Size]
    ) -> Point:
        """
        Offset of the index-th placed page from the base position.

        Args:
            index: Position within the selection (0-based)
            geometry: Unscaled size of the page
            scaled_size: (width, height) of this page after scaling
            prior_sizes: Scaled sizes of all earlier placed pages

        Returns:
            (dx, dy) added to the base position
        """
        ...

    @property
    def name(self) -> str:
        """
        Strategy identifier for logging and configuration.

        Returns:
            Registered name of this strategy (e.g. 'grid', 'vertical')
        """
        ...
