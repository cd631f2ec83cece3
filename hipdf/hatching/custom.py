"""
Custom pattern content

Four kinds of user-defined cell content, all implementing CustomPattern:

- SimplePattern: fn(width, height) -> operations
- ParametricPattern: fn(width, height, params) -> operations
- ProceduralPattern: a sampler decides which cells of an r x r grid to paint
- CompositePattern: pre-built elements, each optionally transformed

CustomPatternBuilder offers a path-drawing API for building the operations
(or a whole pattern cell via HatchingManager.create_custom_pattern).
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pikepdf

from ..operations import Operation, op
from ..transform import Transform
from .base import PatternSampler
from .styles import KAPPA, circle_path

Color = Tuple[float, float, float]


@dataclass
class PatternParams:
    """
    Free-form parameters for a ParametricPattern.

    Attributes:
        data: Numeric parameters; missing keys read as 0.0
        colors: Palette, starting with black
        strings: Text parameters
    """
    data: Dict[str, float] = field(default_factory=dict)
    colors: List[Color] = field(default_factory=lambda: [(0.0, 0.0, 0.0)])
    strings: Dict[str, str] = field(default_factory=dict)

    def with_param(self, key: str, value: float) -> "PatternParams":
        self.data[key] = value
        return self

    def with_color(self, r: float, g: float, b: float) -> "PatternParams":
        self.colors.append((r, g, b))
        return self

    def with_string(self, key: str, value: str) -> "PatternParams":
        self.strings[key] = value
        return self

    def get(self, key: str) -> float:
        return self.data.get(key, 0.0)


class SimplePattern:
    def __init__(self, function: Callable[[float, float], List[Operation]]):
        self.function = function

    def generate(self, width: float, height: float) -> List[Operation]:
        return list(self.function(width, height))

    def __repr__(self) -> str:
        return "SimplePattern(<function>)"


class ParametricPattern:
    def __init__(self, function: Callable[[float, float, PatternParams], List[Operation]], params: Optional[PatternParams] = None):
        self.function = function
        self.params = params or PatternParams()

    def generate(self, width: float, height: float) -> List[Operation]:
        return list(self.function(width, height, self.params))

    def __repr__(self) -> str:
        return f"ParametricPattern(<function>, {self.params!r})"


class FunctionSampler:
    """Adapts a plain (x, y, t) -> bool callable to PatternSampler."""

    def __init__(self, function: Callable[[float, float, float], bool]):
        self.function = function

    def sample(self, x: float, y: float, t: float) -> bool:
        return bool(self.function(x, y, t))


class ProceduralPattern:
    """
    Paint the cells of a resolution x resolution grid chosen by a sampler.

    The grid step is min(width, height) / resolution. Painted cells become
    filled squares when `fill` is set, otherwise filled dots of radius
    0.3 * step centred in the cell.

    Raises:
        ValueError: If resolution is less than 1
    """

    def __init__(
        self,
        sampler: Union[PatternSampler, Callable[[float, float, float], bool]],
        resolution: int = 10,
        fill: bool = True
    ):
        if resolution < 1:
            raise ValueError(f"Procedural pattern resolution must be at least 1, got {resolution}")

        if not hasattr(sampler, 'sample'):
            sampler = FunctionSampler(sampler)

        self.sampler = sampler
        self.resolution = resolution
        self.fill = fill

    def generate(self, width: float, height: float) -> List[Operation]:
        ops = []
        step = min(width, height) / self.resolution

        for i in range(self.resolution):
            for j in range(self.resolution):
                x = i * step
                y = j * step
                t = (i / self.resolution + j / self.resolution) / 2.0

                if not self.sampler.sample(x, y, t):
                    continue

                if self.fill:
                    ops.append(op('re', x, y, step, step))
                else:
                    ops.extend(circle_path(x + step / 2.0, y + step / 2.0, step * 0.3))
                ops.append(op('f'))

        return ops

    def __repr__(self) -> str:
        return f"ProceduralPattern(resolution={self.resolution}, fill={self.fill})"


@dataclass
class PatternElement:
    """
    One part of a CompositePattern.

    Attributes:
        operations: Instructions of this element
        transform: Optional transform; the element is wrapped in q ... Q
        opacity: Recorded only
    """
    operations: List[Operation] = field(default_factory=list)
    transform: Optional[Transform] = None
    opacity: float = 1.0


class CompositePattern:
    def __init__(self, elements: Iterable[PatternElement]):
        self.elements = list(elements)

    def generate(self, width: float, height: float) -> List[Operation]:
        ops = []
        for element in self.elements:
            if element.transform is not None:
                ops.append(op('q'))
                ops.append(element.transform.to_operation())
            ops.extend(element.operations)
            if element.transform is not None:
                ops.append(op('Q'))
        return ops

    def __repr__(self) -> str:
        return f"CompositePattern({len(self.elements)} elements)"


class CustomPatternBuilder:
    """
    Fluent builder for pattern content.

    Path segments (move_to, line_to, curve_to, close_path, rectangle and the
    shape helpers) are held back until a painting operator (stroke, fill,
    fill_stroke) or build() flushes them, so style operators set between
    segments land before the path.
    """

    def __init__(self):
        self._operations: List[Operation] = []
        self._current_path: List[Operation] = []
        self._transform_stack: List[Transform] = []

    # Path construction

    def move_to(self, x: float, y: float) -> "CustomPatternBuilder":
        self._current_path.append(op('m', x, y))
        return self

    def line_to(self, x: float, y: float) -> "CustomPatternBuilder":
        self._current_path.append(op('l', x, y))
        return self

    def curve_to(self, cx1: float, cy1: float, cx2: float, cy2: float, x: float, y: float) -> "CustomPatternBuilder":
        self._current_path.append(op('c', cx1, cy1, cx2, cy2, x, y))
        return self

    def close_path(self) -> "CustomPatternBuilder":
        self._current_path.append(op('h'))
        return self

    def rectangle(self, x: float, y: float, width: float, height: float) -> "CustomPatternBuilder":
        self._current_path.append(op('re', x, y, width, height))
        return self

    def circle(self, cx: float, cy: float, r: float) -> "CustomPatternBuilder":
        k = KAPPA * r
        return (
            self.move_to(cx + r, cy)
            .curve_to(cx + r, cy + k, cx + k, cy + r, cx, cy + r)
            .curve_to(cx - k, cy + r, cx - r, cy + k, cx - r, cy)
            .curve_to(cx - r, cy - k, cx - k, cy - r, cx, cy - r)
            .curve_to(cx + k, cy - r, cx + r, cy - k, cx + r, cy)
            .close_path()
        )

    def polygon(self, points: Sequence[Tuple[float, float]]) -> "CustomPatternBuilder":
        if not points:
            return self
        first, *rest = points
        self.move_to(*first)
        for point in rest:
            self.line_to(*point)
        return self.close_path()

    # Painting

    def stroke(self) -> "CustomPatternBuilder":
        self._flush_path()
        self._operations.append(op('S'))
        return self

    def fill(self) -> "CustomPatternBuilder":
        self._flush_path()
        self._operations.append(op('f'))
        return self

    def fill_stroke(self) -> "CustomPatternBuilder":
        self._flush_path()
        self._operations.append(op('B'))
        return self

    # Graphics state

    def set_line_width(self, width: float) -> "CustomPatternBuilder":
        self._operations.append(op('w', width))
        return self

    def set_stroke_color(self, r: float, g: float, b: float) -> "CustomPatternBuilder":
        self._operations.append(op('RG', r, g, b))
        return self

    def set_fill_color(self, r: float, g: float, b: float) -> "CustomPatternBuilder":
        self._operations.append(op('rg', r, g, b))
        return self

    def set_dash_pattern(self, pattern: Sequence[float], phase: float = 0.0) -> "CustomPatternBuilder":
        self._operations.append(op('d', pikepdf.Array(list(pattern)), phase))
        return self

    def push_transform(self, transform: Transform) -> "CustomPatternBuilder":
        self._operations.append(op('q'))
        self._operations.append(transform.to_operation())
        self._transform_stack.append(transform)
        return self

    def pop_transform(self) -> "CustomPatternBuilder":
        """Restore the state saved by the matching push_transform(); no-op when none is open."""
        if self._transform_stack:
            self._transform_stack.pop()
            self._operations.append(op('Q'))
        return self

    # Raw instructions

    def add_operation(self, operation: Operation) -> "CustomPatternBuilder":
        self._operations.append(operation)
        return self

    def add_operations(self, operations: Iterable[Operation]) -> "CustomPatternBuilder":
        self._operations.extend(operations)
        return self

    def _flush_path(self) -> None:
        self._operations.extend(self._current_path)
        self._current_path.clear()

    def build(self) -> List[Operation]:
        self._flush_path()
        return list(self._operations)
