"""
Vector mathematics utilities for motion path geometry.

Tangent vectors of Bezier segments are Vector2D instances; headings derived
from them follow the field compass convention used throughout the editor:
0 degrees points along +y and angles grow clockwise.
"""

import math
from typing import Optional


class Vector2D:
    """
    2D vector, used for curve derivatives.
    """

    def __init__(self, x: float, y: float):
        self.x = float(x)
        self.y = float(y)

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.2f}, {self.y:.2f})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector2D):
            return False
        return math.isclose(self.x, other.x) and math.isclose(self.y, other.y)

    def heading(self) -> Optional[float]:
        """
        Compass direction of the vector in degrees.

        Returns:
            Optional[float]: Angle in (-180, 180], clockwise from +y; None
                for a zero vector
        """
        if self.x == 0 and self.y == 0:
            return None
        return from_radian_to_degree(math.atan2(self.x, self.y))


def from_radian_to_degree(radian: float) -> float:
    return radian * 180 / math.pi
