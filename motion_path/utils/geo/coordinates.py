"""
Coordinate definitions for motion path geometry.

Every position handed out by the sampling engine (curve samples, resampled
points, control positions) is expressed as a Point2D in the path's own
linear unit.
"""
import math


class Point2D:
    """
    Two-dimensional point in path coordinate space.

    Standard position format for all curve and sampling operations.
    """

    def __init__(self, x: float, y: float):
        """
        Initialize a 2D point.

        Args:
            x: x-coordinate
            y: y-coordinate
        """
        self.x = float(x)
        self.y = float(y)

    def __repr__(self) -> str:
        """String representation of the point."""
        return f"Point2D({self.x:.2f}, {self.y:.2f})"

    def __eq__(self, other) -> bool:
        """Check if two points are equal."""
        if not isinstance(other, Point2D):
            return False
        return math.isclose(self.x, other.x) and math.isclose(self.y, other.y)

    def __hash__(self) -> int:
        """Hash value for using points in dictionaries and sets."""
        return hash((round(self.x, 6), round(self.y, 6)))
