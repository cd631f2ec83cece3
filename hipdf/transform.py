"""
Affine transforms shared by blocks, embedded pages and pattern elements.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from .operations import Operation, op

Matrix = Tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class Transform:
    """
    Scale, then rotate (degrees, counter-clockwise), then translate.

    The PDF matrix is [a b c d e f] with
        a = sx*cos, b = sx*sin, c = -sy*sin, d = sy*cos, e = tx, f = ty
    """
    scale_x: float = 1.0
    scale_y: float = 1.0
    rotation: float = 0.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @classmethod
    def translate(cls, x: float, y: float) -> "Transform":
        return cls(translate_x=x, translate_y=y)

    @classmethod
    def translate_scale(cls, x: float, y: float, scale: float) -> "Transform":
        return cls(scale_x=scale, scale_y=scale, translate_x=x, translate_y=y)

    @classmethod
    def translate_scale_xy(cls, x: float, y: float, scale_x: float, scale_y: float) -> "Transform":
        return cls(scale_x=scale_x, scale_y=scale_y, translate_x=x, translate_y=y)

    @classmethod
    def full(cls, x: float, y: float, scale_x: float, scale_y: float, rotation: float) -> "Transform":
        return cls(scale_x, scale_y, rotation, x, y)

    def to_matrix(self) -> Matrix:
        angle_rad = self.rotation * math.pi / 180.0
        cos_angle = math.cos(angle_rad)
        sin_angle = math.sin(angle_rad)

        return (
            self.scale_x * cos_angle,
            self.scale_x * sin_angle,
            -self.scale_y * sin_angle,
            self.scale_y * cos_angle,
            self.translate_x,
            self.translate_y,
        )

    def to_operation(self) -> Operation:
        """The 'cm' instruction for this transform."""
        return op('cm', *self.to_matrix())
