"""
Hatching patterns for hipdf

Creates tiling pattern streams (PatternType 1, colored, constant spacing)
for built-in hatch styles and custom pattern content, and the instructions
that fill shapes with them.

Usage:
    manager = HatchingManager()
    config = HatchConfig(HatchStyle.CROSS).with_spacing(8).with_color(0, 0, 1)
    pattern, pattern_name = manager.create_pattern(pdf, config)

    resources = page.obj.Resources
    manager.add_pattern_to_resources(resources, pattern_name, pattern)

    ops = PatternedShapeBuilder().rectangle(50, 50, 200, 100, pattern_name).build()
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

import pikepdf

from ..operations import Operation, encode_operations, name, op
from ..transform import Transform
from ..utilities import Print
from . import get_hatch_style
from .base import CustomPattern
from .custom import CustomPatternBuilder
from .styles import circle_path

Color = Tuple[float, float, float]


class HatchStyle(Enum):
    """Built-in hatch styles. Values are the registered style names."""
    DIAGONAL_RIGHT = "diagonal_right"
    DIAGONAL_LEFT = "diagonal_left"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    CROSS = "cross"
    DIAGONAL_CROSS = "diagonal_cross"
    DOTS = "dots"
    CHECKERBOARD = "checkerboard"
    BRICK = "brick"
    HEXAGONAL = "hexagonal"
    WAVE = "wave"
    ZIGZAG = "zigzag"
    CIRCLES = "circles"
    TRIANGLES = "triangles"
    DIAMOND = "diamond"
    SCALES = "scales"
    SPIRAL = "spiral"
    DOTTED_GRID = "dotted_grid"
    CONCENTRIC_CIRCLES = "concentric_circles"
    WOOD_GRAIN = "wood_grain"


@dataclass
class HatchConfig:
    """
    Configuration for one hatching pattern.

    Attributes:
        style: Built-in HatchStyle, or a CustomPattern object
        spacing: Base cell size in points
        line_width: Stroke width in points (built-in styles only)
        color: RGB stroke and fill color (built-in styles only)
        background: RGB fill behind the cell content, or None for transparent
        angle: Rotation of the cell content in degrees (built-in styles only)
        scale: Multiplier applied to spacing for the cell size
    """
    style: Union[HatchStyle, CustomPattern] = HatchStyle.DIAGONAL_RIGHT
    spacing: float = 5.0
    line_width: float = 0.5
    color: Color = (0.0, 0.0, 0.0)
    background: Optional[Color] = None
    angle: float = 0.0
    scale: float = 1.0

    @classmethod
    def from_dict(cls, config: dict) -> "HatchConfig":
        """
        Build from the 'hatching' configuration section.

        Raises:
            ValueError: If 'style' is not a built-in style name
        """
        background = config.get('background')
        return cls(
            style=HatchStyle(config.get('style', HatchStyle.DIAGONAL_RIGHT.value)),
            spacing=float(config.get('spacing', 5.0)),
            line_width=float(config.get('line_width', 0.5)),
            color=tuple(config.get('color', (0.0, 0.0, 0.0))),
            background=tuple(background) if background is not None else None,
            angle=float(config.get('angle', 0.0)),
            scale=float(config.get('scale', 1.0)),
        )

    @property
    def is_custom(self) -> bool:
        return not isinstance(self.style, HatchStyle)

    def with_spacing(self, spacing: float) -> "HatchConfig":
        self.spacing = spacing
        return self

    def with_line_width(self, width: float) -> "HatchConfig":
        self.line_width = width
        return self

    def with_color(self, r: float, g: float, b: float) -> "HatchConfig":
        self.color = (r, g, b)
        return self

    def with_background(self, r: float, g: float, b: float) -> "HatchConfig":
        self.background = (r, g, b)
        return self

    def with_angle(self, angle: float) -> "HatchConfig":
        self.angle = angle
        return self

    def with_scale(self, scale: float) -> "HatchConfig":
        self.scale = scale
        return self


class HatchingManager:
    """Creates tiling patterns and names them P1, P2, ..."""

    def __init__(self, config: Optional[dict] = None):
        """
        Args:
            config: Optional 'hatching' configuration section; used as the
                    HatchConfig when create_pattern() is called without one
        """
        self.defaults = HatchConfig.from_dict(config or {})
        self.pattern_counter = 0

    def _next_name(self) -> str:
        self.pattern_counter += 1
        return f"P{self.pattern_counter}"

    def create_pattern(self, pdf: pikepdf.Pdf, config: Optional[HatchConfig] = None) -> Tuple[pikepdf.Object, str]:
        """
        Create a tiling pattern for a hatch configuration.

        Args:
            pdf: Document that owns the pattern stream
            config: Hatch configuration; defaults to the manager's defaults

        Returns:
            (indirect pattern stream, resource name without slash)
        """
        config = config or self.defaults
        pattern_name = self._next_name()

        width, height = self.calculate_pattern_bounds(config)
        operations = self.generate_pattern_operations(config, width, height)

        pattern = self._pattern_stream(pdf, operations, width, height)
        Print("DEBUG", f"Created pattern {pattern_name} ({self._style_name(config)}, {width:g}x{height:g})")
        return pattern, pattern_name

    def create_custom_pattern(
        self,
        pdf: pikepdf.Pdf,
        width: float,
        height: float,
        builder_fn: Callable[[CustomPatternBuilder], object]
    ) -> Tuple[pikepdf.Object, str]:
        """
        Create a tiling pattern whose cell is drawn by `builder_fn`.

        Args:
            pdf: Document that owns the pattern stream
            width: Cell width in points
            height: Cell height in points
            builder_fn: Called with a fresh CustomPatternBuilder; its return
                        value is ignored

        Returns:
            (indirect pattern stream, resource name without slash)
        """
        pattern_name = self._next_name()

        builder = CustomPatternBuilder()
        builder_fn(builder)

        pattern = self._pattern_stream(pdf, builder.build(), width, height)
        Print("DEBUG", f"Created custom pattern {pattern_name} ({width:g}x{height:g})")
        return pattern, pattern_name

    def add_pattern_to_resources(self, resources: pikepdf.Dictionary, pattern_name: str, pattern: pikepdf.Object) -> None:
        """Register a pattern under /Pattern in a resources dictionary."""
        if '/Pattern' not in resources:
            resources.Pattern = pikepdf.Dictionary()
        resources.Pattern[name(pattern_name)] = pattern

    def calculate_pattern_bounds(self, config: HatchConfig) -> Tuple[float, float]:
        """Cell size: spacing * scale, times the style's multipliers."""
        base_size = config.spacing * config.scale
        if config.is_custom:
            return base_size, base_size

        width_factor, height_factor = get_hatch_style(config.style.value).bounds
        return base_size * width_factor, base_size * height_factor

    def generate_pattern_operations(self, config: HatchConfig, width: float, height: float) -> List[Operation]:
        """
        Instructions for one pattern cell.

        Order: optional background (rg re f); then either the custom
        pattern's own instructions, or line width, stroke and fill color,
        an optional rotation and the style geometry.
        """
        ops = []

        if config.background is not None:
            ops.append(op('rg', *config.background))
            ops.append(op('re', 0, 0, width, height))
            ops.append(op('f'))

        if config.is_custom:
            ops.extend(config.style.generate(width, height))
            return ops

        ops.append(op('w', config.line_width))
        ops.append(op('RG', *config.color))
        ops.append(op('rg', *config.color))

        if config.angle != 0.0:
            ops.append(Transform(rotation=config.angle).to_operation())

        ops.extend(get_hatch_style(config.style.value).generate(width, height, config))
        return ops

    def _pattern_stream(self, pdf: pikepdf.Pdf, operations: List[Operation], width: float, height: float) -> pikepdf.Object:
        pattern = pikepdf.Stream(pdf, encode_operations(operations))
        pattern.stream_dict[pikepdf.Name.Type] = pikepdf.Name.Pattern
        pattern.stream_dict[pikepdf.Name.PatternType] = 1
        pattern.stream_dict[pikepdf.Name.PaintType] = 1
        pattern.stream_dict[pikepdf.Name.TilingType] = 1
        pattern.stream_dict[pikepdf.Name.BBox] = pikepdf.Array([0, 0, width, height])
        pattern.stream_dict[pikepdf.Name.XStep] = width
        pattern.stream_dict[pikepdf.Name.YStep] = height
        pattern.stream_dict[pikepdf.Name.Resources] = pikepdf.Dictionary()
        return pdf.make_indirect(pattern)

    @staticmethod
    def _style_name(config: HatchConfig) -> str:
        return "custom" if config.is_custom else config.style.value


class PatternOperations:
    """Instructions that select a pattern as the current color."""

    @staticmethod
    def set_pattern_fill_colorspace() -> Operation:
        return op('cs', pikepdf.Name.Pattern)

    @staticmethod
    def set_pattern_stroke_colorspace() -> Operation:
        return op('CS', pikepdf.Name.Pattern)

    @staticmethod
    def set_fill_pattern(pattern_name: str) -> Operation:
        return op('scn', name(pattern_name))

    @staticmethod
    def set_stroke_pattern(pattern_name: str) -> Operation:
        return op('SCN', name(pattern_name))


class PatternedShapeBuilder:
    """Shapes filled with a pattern: cs /Pattern, scn /name, path, f."""

    def __init__(self):
        self._operations: List[Operation] = []

    def _select(self, pattern_name: str) -> None:
        self._operations.append(PatternOperations.set_pattern_fill_colorspace())
        self._operations.append(PatternOperations.set_fill_pattern(pattern_name))

    def rectangle(self, x: float, y: float, width: float, height: float, pattern_name: str) -> "PatternedShapeBuilder":
        self._select(pattern_name)
        self._operations.append(op('re', x, y, width, height))
        self._operations.append(op('f'))
        return self

    def circle(self, cx: float, cy: float, r: float, pattern_name: str) -> "PatternedShapeBuilder":
        self._select(pattern_name)
        self._operations.extend(circle_path(cx, cy, r))
        self._operations.append(op('f'))
        return self

    def triangle(
        self,
        x1: float, y1: float,
        x2: float, y2: float,
        x3: float, y3: float,
        pattern_name: str
    ) -> "PatternedShapeBuilder":
        self._select(pattern_name)
        self._operations.extend([op('m', x1, y1), op('l', x2, y2), op('l', x3, y3), op('h'), op('f')])
        return self

    def build(self) -> List[Operation]:
        return list(self._operations)
