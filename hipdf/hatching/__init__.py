"""
Hatch Style Registry and hatching API for hipdf

Decorator-based registration of built-in styles. Each style is a function
drawing one pattern cell, registered together with the cell size it needs
as a multiple of spacing * scale.

Usage:
    # In a style implementation:
    @register_hatch_style("brick", bounds=(4.0, 2.0))
    def brick(width, height, config):
        return [...]

    # To get a style:
    style = get_hatch_style("brick")
    ops = style.generate(20.0, 10.0, config)
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ..operations import Operation


@dataclass(frozen=True)
class HatchStyleDef:
    """A registered style: its cell generator and cell size multipliers."""
    name: str
    generate: Callable[[float, float, object], List[Operation]]
    bounds: Tuple[float, float] = (1.0, 1.0)


# Global registry of hatch styles
HATCH_STYLE_REGISTRY: Dict[str, HatchStyleDef] = {}


def register_hatch_style(name: str, bounds: Tuple[float, float] = (1.0, 1.0)):
    """
    Decorator to register hatch style generators.

    Args:
        name: Unique identifier for this style
        bounds: (width, height) of one cell in units of spacing * scale

    Returns:
        Decorator function that registers the generator
    """
    def decorator(generator):
        HATCH_STYLE_REGISTRY[name] = HatchStyleDef(name, generator, bounds)
        return generator
    return decorator


def get_hatch_style(name: str) -> HatchStyleDef:
    """
    Get a registered hatch style by name.

    Raises:
        ValueError: If style name is not registered
    """
    if name not in HATCH_STYLE_REGISTRY:
        available = ', '.join(HATCH_STYLE_REGISTRY.keys()) if HATCH_STYLE_REGISTRY else 'none'
        raise ValueError(
            f"Unknown hatch style: '{name}'. "
            f"Available styles: {available}"
        )
    return HATCH_STYLE_REGISTRY[name]


# Import styles to trigger registration
from . import styles  # noqa: E402,F401
from .base import CustomPattern, PatternSampler  # noqa: E402
from .custom import (  # noqa: E402
    CompositePattern,
    CustomPatternBuilder,
    FunctionSampler,
    ParametricPattern,
    PatternElement,
    PatternParams,
    ProceduralPattern,
    SimplePattern,
)
from .manager import HatchConfig, HatchingManager, HatchStyle, PatternedShapeBuilder, PatternOperations  # noqa: E402

__all__ = [
    'HATCH_STYLE_REGISTRY', 'HatchStyleDef', 'register_hatch_style', 'get_hatch_style',
    'CustomPattern', 'PatternSampler',
    'PatternParams', 'SimplePattern', 'ParametricPattern', 'ProceduralPattern', 'FunctionSampler',
    'PatternElement', 'CompositePattern', 'CustomPatternBuilder',
    'HatchStyle', 'HatchConfig', 'HatchingManager', 'PatternOperations', 'PatternedShapeBuilder',
]
