"""
Pattern protocols for hipdf hatching

Defines the contracts for user-supplied pattern content.
"""

from typing import List, Protocol

from ..operations import Operation


class PatternSampler(Protocol):
    """
    Protocol for procedural pattern samplers.

    Samplers decide, cell by cell, whether a procedural pattern paints
    anything at that spot.
    """

    def sample(self, x: float, y: float, t: float) -> bool:
        """
        Decide whether the grid cell at (x, y) is painted.

        Args:
            x: Left edge of the cell in pattern space
            y: Bottom edge of the cell in pattern space
            t: Position along the grid diagonal, 0.0 at the origin cell

        Returns:
            True to paint the cell
        """
        ...


class CustomPattern(Protocol):
    """
    Protocol for custom pattern content.

    A custom pattern replaces a built-in style: its operations are the whole
    cell content apart from the optional background, so it sets its own
    colors and line widths.
    """

    def generate(self, width: float, height: float) -> List[Operation]:
        """
        Produce the instructions for one pattern cell.

        Args:
            width: Cell width in points
            height: Cell height in points

        Returns:
            Content stream instructions
        """
        ...
