"""
Control points of a motion path.

A control is either an endpoint control, which bounds a segment and carries
the robot heading at that spot, or an interior control, which only shapes
the curve. Both are the same type; the heading being present is the tag.
"""
import math
from typing import Optional

from motion_path.utils.geo.coordinates import Point2D


class ControlPoint(Point2D):
    """
    Position in path space with an optional heading in degrees.

    Segments share endpoint controls by reference, so the identity of a
    ControlPoint matters; equality only compares values.
    """

    def __init__(self, x: float, y: float, heading: Optional[float] = None):
        """
        Initialize a control point.

        Args:
            x: x-coordinate
            y: y-coordinate
            heading: Heading in degrees for endpoint controls, None for interior ones
        """
        super().__init__(x, y)
        self.heading = None if heading is None else float(heading)

    @property
    def is_endpoint(self) -> bool:
        return self.heading is not None

    def __repr__(self) -> str:
        if self.is_endpoint:
            return f"ControlPoint({self.x:.2f}, {self.y:.2f}, heading={self.heading:.1f})"
        return f"ControlPoint({self.x:.2f}, {self.y:.2f})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ControlPoint):
            return False
        if self.heading is None or other.heading is None:
            same_heading = self.heading is other.heading
        else:
            same_heading = math.isclose(self.heading, other.heading)
        return super().__eq__(other) and same_heading

    def __hash__(self) -> int:
        return hash((round(self.x, 6), round(self.y, 6), self.heading is not None))
