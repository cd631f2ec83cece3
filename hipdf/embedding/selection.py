"""
Page selection for embedding

A page range says which source pages an embed call wants; the layout
strategy may narrow that further (FirstOnly, SpecificIndex). An empty
result is valid and simply places nothing.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Single:
    """One page, by 0-based index. Not bounds-checked here."""
    index: int

    def resolve(self, total_pages: int) -> List[int]:
        return [self.index]


@dataclass(frozen=True)
class Range:
    """Pages start..end inclusive; end is clamped to the last page."""
    start: int
    end: int

    def resolve(self, total_pages: int) -> List[int]:
        return list(range(self.start, min(self.end, total_pages - 1) + 1))


@dataclass(frozen=True)
class Pages:
    """Explicit indices, in the given order. Duplicates are kept."""
    indices: Tuple[int, ...]

    def __init__(self, indices: Sequence[int]):
        object.__setattr__(self, 'indices', tuple(indices))

    def resolve(self, total_pages: int) -> List[int]:
        return list(self.indices)


@dataclass(frozen=True)
class All:
    """Every page of the source document."""

    def resolve(self, total_pages: int) -> List[int]:
        return list(range(total_pages))


PageRange = Union[Single, Range, Pages, All]


def select_pages(page_range: Optional[PageRange], strategy, total_pages: int) -> List[int]:
    """
    Turn a page range and a layout strategy into the ordered page list.

    Args:
        page_range: Requested range; None means All
        strategy: LayoutStrategy applying its own filtering
        total_pages: Page count of the source document

    Returns:
        Page indices to place (possibly empty)
    """
    pages = (page_range or All()).resolve(total_pages)
    return list(strategy.select(pages, total_pages))
