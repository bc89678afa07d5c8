"""
Common structures for path sampling and uniform resampling.

This module provides the result types shared by the samplers and the
resampler, and re-exports the error hierarchy they raise.
"""
import math
from typing import List, Optional, Tuple
from dataclasses import dataclass, field

import numpy as np

from motion_path.utils.geo.coordinates import Point2D
from motion_path.utils.config import config_manager
from motion_path.domain.path.errors import (
    PathSamplingError, MalformedSegmentError, PathContinuityError, InvalidDensityError
)

__all__ = [
    "Sample", "PathSampleResult", "UniformPoint", "SegmentIndexRange", "ResampleResult",
    "PathSamplingError", "MalformedSegmentError", "PathContinuityError", "InvalidDensityError",
    "check_density",
]


@dataclass(frozen=True)
class Sample:
    """
    Point of the dense, arc-length-indexed sample cloud.
    """
    position: Point2D                  # Position on the curve
    distance: float                    # Cumulative arc length from the path start
    segment_index: int                 # Index of the originating segment
    t: float                           # Curve parameter within the segment
    heading: Optional[float] = None    # Only set on endpoint samples
    is_endpoint: bool = False          # Sample coincides with an endpoint control

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y


@dataclass(eq=False)
class PathSampleResult:
    """
    Dense sampling of a whole path, stored column-wise in numpy arrays.

    Sample objects are built on demand by sample() and points.
    """
    positions: np.ndarray = field(default_factory=lambda: np.empty((0, 2)))      # (N, 2)
    distances: np.ndarray = field(default_factory=lambda: np.empty(0))           # cumulative arc length
    segments: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=int))  # originating segment
    ts: np.ndarray = field(default_factory=lambda: np.empty(0))                  # curve parameter
    endpoint_headings: List[Tuple[float, float]] = field(default_factory=list)   # per segment (first, last)
    arc_length: float = 0.0

    def __len__(self) -> int:
        return len(self.distances)

    @property
    def segment_count(self) -> int:
        return len(self.endpoint_headings)

    def sample(self, index: int) -> Sample:
        """Sample at index; only t == 0 and t == 1 samples carry a heading."""
        segment_index = int(self.segments[index])
        t = float(self.ts[index])
        heading = None
        if t == 0.0:
            heading = self.endpoint_headings[segment_index][0]
        elif t == 1.0:
            heading = self.endpoint_headings[segment_index][1]

        x, y = self.positions[index]
        return Sample(
            position=Point2D(x, y),
            distance=float(self.distances[index]),
            segment_index=segment_index,
            t=t,
            heading=heading,
            is_endpoint=t in (0.0, 1.0),
        )

    @property
    def points(self) -> List[Sample]:
        return [self.sample(i) for i in range(len(self))]

    def segment_ends(self) -> np.ndarray:
        """Index of the last sample of every segment, in segment order."""
        if not len(self):
            return np.empty(0, dtype=int)
        return np.append(np.flatnonzero(np.diff(self.segments)), len(self) - 1)


@dataclass
class UniformPoint:
    """
    Point of the uniformly resampled output.
    """
    position: Point2D
    heading: Optional[float] = None    # Endpoint heading, None on plain density points
    is_last: bool = False              # Terminates an original segment

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y


@dataclass(frozen=True)
class SegmentIndexRange:
    """
    Half-open range [start, end) of uniform points contributed by one segment.
    """
    segment_index: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def as_slice(self) -> slice:
        return slice(self.start, self.end)


@dataclass
class ResampleResult:
    """
    Uniform points of a path and the range each segment occupies in them.
    """
    points: List[UniformPoint] = field(default_factory=list)
    segment_indexes: List[SegmentIndexRange] = field(default_factory=list)

    def points_of_segment(self, segment_index: int) -> List[UniformPoint]:
        return self.points[self.segment_indexes[segment_index].as_slice()]


def check_density(density: Optional[float] = None) -> float:
    """
    Validate a resampling density; None falls back to sampling.density.

    Returns:
        float: The density as a float

    Raises:
        InvalidDensityError: If density is not a finite positive number
    """
    if density is None:
        density = config_manager.get("sampling", "density", 2.0)
    try:
        value = float(density)
    except (TypeError, ValueError):
        raise InvalidDensityError(f"Density must be a number, got {density!r}") from None
    if not value > 0 or math.isinf(value):
        raise InvalidDensityError(f"Density must be positive, got {density!r}")
    return value
