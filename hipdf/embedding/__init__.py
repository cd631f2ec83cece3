"""
Layout Strategy Registry and embedding API for hipdf

Factory pattern with decorator-based registration.

Usage:
    # In a layout implementation:
    @register_layout("grid")
    @dataclass(frozen=True)
    class Grid:
        columns: int = 2

        @classmethod
        def create(cls, config: dict) -> "Grid":
            return cls(columns=config.get('columns', 2))

    # To get a layout:
    layout = get_layout("grid", {"columns": 3})
"""

from typing import Callable, Dict

from .base import LayoutStrategy

# Global registry of layout strategy factories
LAYOUT_REGISTRY: Dict[str, Callable[[dict], LayoutStrategy]] = {}


def register_layout(name: str):
    """
    Decorator to register layout strategy classes.

    Args:
        name: Unique identifier for this layout

    Returns:
        Decorator function that registers the class's create() factory
    """
    def decorator(layout_class):
        LAYOUT_REGISTRY[name] = layout_class.create
        return layout_class
    return decorator


def get_layout(name: str, config: dict = None) -> LayoutStrategy:
    """
    Get a layout strategy instance by name.

    Args:
        name: Layout identifier (must be registered)
        config: Layout-specific configuration dictionary

    Returns:
        Layout strategy instance

    Raises:
        ValueError: If layout name is not registered
    """
    if name not in LAYOUT_REGISTRY:
        available = ', '.join(LAYOUT_REGISTRY.keys()) if LAYOUT_REGISTRY else 'none'
        raise ValueError(
            f"Unknown layout: '{name}'. "
            f"Available layouts: {available}"
        )
    return LAYOUT_REGISTRY[name](config or {})


# Import strategies to trigger registration
from .layouts import Custom, FirstOnly, Grid, GridFillOrder, HorizontalStack, SpecificIndex, VerticalStack  # noqa: E402
from .selection import All, PageRange, Pages, Range, Single, select_pages  # noqa: E402
from .engine import compute_placements, emit_operations, resolve_scale  # noqa: E402
from .embedder import EmbedOptions, EmbedResult, EmbeddedPdfInfo, PdfEmbedder, page_geometry  # noqa: E402
from .builder import EmbedLayoutBuilder, full_page_options, thumbnail_options, watermark_options  # noqa: E402

__all__ = [
    'LAYOUT_REGISTRY', 'register_layout', 'get_layout', 'LayoutStrategy',
    'FirstOnly', 'SpecificIndex', 'VerticalStack', 'HorizontalStack', 'Grid', 'GridFillOrder', 'Custom',
    'Single', 'Range', 'Pages', 'All', 'PageRange', 'select_pages',
    'resolve_scale', 'compute_placements', 'emit_operations',
    'EmbedOptions', 'EmbedResult', 'EmbeddedPdfInfo', 'PdfEmbedder', 'page_geometry',
    'EmbedLayoutBuilder', 'watermark_options', 'thumbnail_options', 'full_page_options',
]
