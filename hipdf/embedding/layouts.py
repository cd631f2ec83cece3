"""
Multi-page layout strategies

Each strategy decides three things for an embed call: which of the
requested pages survive, how large each page is drawn and where it goes
relative to the base position. All built-in strategies except Custom are
registered by name and can be built from the 'embedding.layouts' section
of the configuration.

Usage:
    layout = Grid(columns=3, gap_x=10, gap_y=10)
    layout = get_layout("vertical", {"gap": 20})
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from . import register_layout
from .base import LayoutRequest, PageGeometry, Point, Scale, Size
from .engine import resolve_scale


class GridFillOrder(Enum):
    """Order in which grid cells are filled."""
    ROW_FIRST = "row_first"          # left to right, then top to bottom
    COLUMN_FIRST = "column_first"    # top to bottom, then left to right


class _ConstrainedLayout:
    """Shared behaviour: keep every requested page, scale by constraints."""

    def select(self, pages: Sequence[int], total_pages: int) -> Sequence[int]:
        return list(pages)

    def resolve_scale(self, index: int, geometry: PageGeometry, request: LayoutRequest) -> Scale:
        return resolve_scale(geometry, request)


@register_layout("first_page")
@dataclass(frozen=True)
class FirstOnly(_ConstrainedLayout):
    """Place only the first requested page, at the base position."""

    @classmethod
    def create(cls, config: dict) -> "FirstOnly":
        return cls()

    def select(self, pages: Sequence[int], total_pages: int) -> Sequence[int]:
        return list(pages[:1])

    def offset(self, index: int, geometry: PageGeometry, scaled_size: Size, prior_sizes: Sequence[Size]) -> Point:
        return 0.0, 0.0

    @property
    def name(self) -> str:
        return "first_page"


@register_layout("specific_page")
@dataclass(frozen=True)
class SpecificIndex(_ConstrainedLayout):
    """
    Place one page chosen by index, ignoring the page range.

    An index past the end of the document selects nothing.
    """
    page: int = 0

    @classmethod
    def create(cls, config: dict) -> "SpecificIndex":
        return cls(page=int(config.get('page', 0)))

    def select(self, pages: Sequence[int], total_pages: int) -> Sequence[int]:
        return [self.page] if self.page < total_pages else []

    def offset(self, index: int, geometry: PageGeometry, scaled_size: Size, prior_sizes: Sequence[Size]) -> Point:
        return 0.0, 0.0

    @property
    def name(self) -> str:
        return "specific_page"


@register_layout("vertical")
@dataclass(frozen=True)
class VerticalStack(_ConstrainedLayout):
    """Stack pages downwards; each page sits below the previous one plus gap."""
    gap: float = 0.0

    @classmethod
    def create(cls, config: dict) -> "VerticalStack":
        return cls(gap=float(config.get('gap', 0.0)))

    def offset(self, index: int, geometry: PageGeometry, scaled_size: Size, prior_sizes: Sequence[Size]) -> Point:
        return 0.0, -sum(height + self.gap for _, height in prior_sizes)

    @property
    def name(self) -> str:
        return "vertical"


@register_layout("horizontal")
@dataclass(frozen=True)
class HorizontalStack(_ConstrainedLayout):
    """Line pages up to the right; each page follows the previous one plus gap."""
    gap: float = 0.0

    @classmethod
    def create(cls, config: dict) -> "HorizontalStack":
        return cls(gap=float(config.get('gap', 0.0)))

    def offset(self, index: int, geometry: PageGeometry, scaled_size: Size, prior_sizes: Sequence[Size]) -> Point:
        return sum(width + self.gap for width, _ in prior_sizes), 0.0

    @property
    def name(self) -> str:
        return "horizontal"


@register_layout("grid")
@dataclass(frozen=True)
class Grid(_ConstrainedLayout):
    """
    Arrange pages in cells sized by the current page's scaled size.

    With COLUMN_FIRST the row is `index % columns` and the column is
    `index // columns`, so `columns` effectively counts rows.

    Raises:
        ValueError: If columns is less than 1
    """
    columns: int = 2
    gap_x: float = 0.0
    gap_y: float = 0.0
    fill_order: GridFillOrder = GridFillOrder.ROW_FIRST

    def __post_init__(self):
        if self.columns < 1:
            raise ValueError(f"Grid columns must be at least 1, got {self.columns}")

    @classmethod
    def create(cls, config: dict) -> "Grid":
        return cls(
            columns=int(config.get('columns', 2)),
            gap_x=float(config.get('gap_x', 0.0)),
            gap_y=float(config.get('gap_y', 0.0)),
            fill_order=GridFillOrder(config.get('fill_order', GridFillOrder.ROW_FIRST.value)),
        )

    def offset(self, index: int, geometry: PageGeometry, scaled_size: Size, prior_sizes: Sequence[Size]) -> Point:
        if self.fill_order is GridFillOrder.ROW_FIRST:
            row, col = divmod(index, self.columns)
        else:
            col, row = divmod(index, self.columns)

        scaled_width, scaled_height = scaled_size
        return col * (scaled_width + self.gap_x), -row * (scaled_height + self.gap_y)

    @property
    def name(self) -> str:
        return "grid"


@dataclass(frozen=True)
class Custom:
    """
    Caller-supplied placement.

    Attributes:
        position_fn: (index, page_width, page_height) -> (dx, dy) offset from
                     the base position, given the unscaled page size
        scale_fn: index -> (scale_x, scale_y), used as-is; max size and
                  aspect ratio settings do not apply
    """
    position_fn: Callable[[int, float, float], Point]
    scale_fn: Callable[[int], Scale]

    def select(self, pages: Sequence[int], total_pages: int) -> Sequence[int]:
        return list(pages)

    def resolve_scale(self, index: int, geometry: PageGeometry, request: LayoutRequest) -> Scale:
        scale_x, scale_y = self.scale_fn(index)
        return scale_x, scale_y

    def offset(self, index: int, geometry: PageGeometry, scaled_size: Size, prior_sizes: Sequence[Size]) -> Point:
        dx, dy = self.position_fn(index, geometry.width, geometry.height)
        return dx, dy

    @property
    def name(self) -> str:
        return "custom"
