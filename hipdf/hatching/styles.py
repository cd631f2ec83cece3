"""
Built-in hatch styles

Every style draws a single tiling cell of `width` x `height` points. Line
width and colors are already set when a style runs, so styles emit only
path construction and painting operators.

Bezier circles use four cubic segments with the control distance
KAPPA * r.
"""

import math
from typing import List

from ..operations import Operation, op
from . import register_hatch_style

KAPPA = 0.5522848


def circle_path(cx: float, cy: float, r: float) -> List[Operation]:
    """A closed circle as m + four c segments, counter-clockwise from (cx + r, cy)."""
    k = KAPPA * r
    return [
        op('m', cx + r, cy),
        op('c', cx + r, cy + k, cx + k, cy + r, cx, cy + r),
        op('c', cx - k, cy + r, cx - r, cy + k, cx - r, cy),
        op('c', cx - r, cy - k, cx - k, cy - r, cx, cy - r),
        op('c', cx + k, cy - r, cx + r, cy - k, cx + r, cy),
    ]


def arc_path(cx: float, cy: float, r: float, start_angle: float, end_angle: float) -> List[Operation]:
    """
    Approximate an arc with a single cubic segment.

    Angles are in radians. Control points sit KAPPA * r away from the end
    points, perpendicular to the mid angle.
    """
    start_x = cx + r * math.cos(start_angle)
    start_y = cy + r * math.sin(start_angle)
    end_x = cx + r * math.cos(end_angle)
    end_y = cy + r * math.sin(end_angle)

    control = r * KAPPA
    mid_angle = (start_angle + end_angle) / 2.0

    return [
        op('m', start_x, start_y),
        op(
            'c',
            start_x + control * math.cos(mid_angle - math.pi / 2.0),
            start_y + control * math.sin(mid_angle - math.pi / 2.0),
            end_x + control * math.cos(mid_angle + math.pi / 2.0),
            end_y + control * math.sin(mid_angle + math.pi / 2.0),
            end_x,
            end_y,
        ),
    ]


@register_hatch_style("diagonal_right")
def diagonal_right(width, height, config) -> List[Operation]:
    return [op('m', 0, 0), op('l', width, height), op('S')]


@register_hatch_style("diagonal_left")
def diagonal_left(width, height, config) -> List[Operation]:
    return [op('m', 0, height), op('l', width, 0), op('S')]


@register_hatch_style("horizontal")
def horizontal(width, height, config) -> List[Operation]:
    return [op('m', 0, height / 2.0), op('l', width, height / 2.0), op('S')]


@register_hatch_style("vertical")
def vertical(width, height, config) -> List[Operation]:
    return [op('m', width / 2.0, 0), op('l', width / 2.0, height), op('S')]


@register_hatch_style("cross")
def cross(width, height, config) -> List[Operation]:
    return horizontal(width, height, config) + vertical(width, height, config)


@register_hatch_style("diagonal_cross")
def diagonal_cross(width, height, config) -> List[Operation]:
    return diagonal_right(width, height, config) + diagonal_left(width, height, config)


@register_hatch_style("dots")
def dots(width, height, config) -> List[Operation]:
    # radius follows the unscaled spacing
    radius = config.spacing * 0.2
    return circle_path(width / 2.0, height / 2.0, radius) + [op('f')]


@register_hatch_style("checkerboard", bounds=(2.0, 2.0))
def checkerboard(width, height, config) -> List[Operation]:
    half_w = width / 2.0
    half_h = height / 2.0
    return [
        op('re', 0, 0, half_w, half_h),
        op('re', half_w, half_h, half_w, half_h),
        op('f'),
    ]


@register_hatch_style("brick", bounds=(4.0, 2.0))
def brick(width, height, config) -> List[Operation]:
    return [
        # mortar line
        op('m', 0, height / 2.0),
        op('l', width, height / 2.0),
        op('S'),
        # staggered joints
        op('m', width / 4.0, 0),
        op('l', width / 4.0, height / 2.0),
        op('S'),
        op('m', width * 3.0 / 4.0, height / 2.0),
        op('l', width * 3.0 / 4.0, height),
        op('S'),
    ]


@register_hatch_style("hexagonal", bounds=(3.0, 2.6))
def hexagonal(width, height, config) -> List[Operation]:
    cx = width / 2.0
    cy = height / 2.0
    r = width / 3.0

    ops = [op('m', cx + r, cy)]
    for i in range(1, 7):
        angle = i * math.pi / 3.0
        ops.append(op('l', cx + r * math.cos(angle), cy + r * math.sin(angle)))
    ops.append(op('S'))
    return ops


@register_hatch_style("wave", bounds=(4.0, 2.0))
def wave(width, height, config) -> List[Operation]:
    return [
        op('m', 0, height / 2.0),
        op('c', width / 4.0, 0, width * 3.0 / 4.0, height, width, height / 2.0),
        op('S'),
    ]


@register_hatch_style("zigzag", bounds=(4.0, 1.0))
def zigzag(width, height, config) -> List[Operation]:
    return [
        op('m', 0, height / 2.0),
        op('l', width / 4.0, 0),
        op('l', width / 2.0, height),
        op('l', width * 3.0 / 4.0, 0),
        op('l', width, height / 2.0),
        op('S'),
    ]


@register_hatch_style("circles", bounds=(2.0, 2.0))
def circles(width, height, config) -> List[Operation]:
    radius = min(width, height) * 0.3
    return circle_path(width / 2.0, height / 2.0, radius) + [op('S')]


@register_hatch_style("triangles", bounds=(2.0, 1.73))
def triangles(width, height, config) -> List[Operation]:
    return [
        op('m', width / 2.0, 0),
        op('l', 0, height),
        op('l', width, height),
        op('h'),
        op('S'),
    ]


@register_hatch_style("diamond", bounds=(2.0, 2.0))
def diamond(width, height, config) -> List[Operation]:
    return [
        op('m', width / 2.0, 0),
        op('l', width, height / 2.0),
        op('l', width / 2.0, height),
        op('l', 0, height / 2.0),
        op('h'),
        op('S'),
    ]


@register_hatch_style("scales", bounds=(2.0, 2.0))
def scales(width, height, config) -> List[Operation]:
    return arc_path(width / 2.0, height, width / 2.0, 0.0, math.pi) + [op('S')]


@register_hatch_style("spiral", bounds=(4.0, 4.0))
def spiral(width, height, config) -> List[Operation]:
    cx = width / 2.0
    cy = height / 2.0
    steps = 20
    max_r = min(width, height) / 2.0

    ops = [op('m', cx, cy)]
    for i in range(1, steps + 1):
        t = i / steps
        angle = t * 2.0 * math.pi
        r = t * max_r
        ops.append(op('l', cx + r * math.cos(angle), cy + r * math.sin(angle)))
    ops.append(op('S'))
    return ops


@register_hatch_style("dotted_grid")
def dotted_grid(width, height, config) -> List[Operation]:
    radius = min(width, height) * 0.1
    return cross(width, height, config) + circle_path(width / 2.0, height / 2.0, radius) + [op('f')]


@register_hatch_style("concentric_circles", bounds=(2.0, 2.0))
def concentric_circles(width, height, config) -> List[Operation]:
    cx = width / 2.0
    cy = height / 2.0
    max_r = min(width, height) / 2.0

    ops = []
    for i in range(1, 4):
        ops.extend(circle_path(cx, cy, max_r * i / 3.0))
        ops.append(op('S'))
    return ops


@register_hatch_style("wood_grain", bounds=(8.0, 2.0))
def wood_grain(width, height, config) -> List[Operation]:
    ops = []
    for i in range(3):
        y = height * (i + 0.5) / 3.0
        ops.append(op('m', 0, y))
        ops.append(op('c', width * 0.2, y - height * 0.1, width * 0.8, y + height * 0.1, width, y))
        ops.append(op('S'))
    return ops
