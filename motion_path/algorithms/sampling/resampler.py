"""
Uniform resampling of a sampled path.

Points are placed on an arc-length grid spaced by the density and
interpolated between the two samples bracketing each grid distance. Segment
ends are reconciled with that grid:

- a segment end close to the last kept point (less than one density away)
  is merged into it: the point is marked as terminating the segment and
  takes the endpoint heading unless it already has one;
- a segment end at least one density past the last kept point is kept as a
  point of its own;
- the final endpoint of the path is always kept.

Grid points are attributed to segments one segment at a time, so a segment
shorter than the density can end up with an empty index range while the
heading of its end lands on the neighbouring point.
"""

import logging
import math
from typing import List, Optional

import numpy as np

from motion_path.domain.path.path import Path
from motion_path.utils.geo.coordinates import Point2D
from motion_path.utils.config import config_manager
from motion_path.utils.logger import get_logger, timed, log_exceptions
from motion_path.algorithms.sampling.common import (
    Sample, PathSampleResult, UniformPoint, SegmentIndexRange, ResampleResult, check_density
)
from motion_path.algorithms.sampling.heading import derivative_heading
from motion_path.algorithms.sampling.path_sampler import PathSampler

logger = get_logger("resampling")


class _UniformPointBuilder:
    """
    Output accumulator of a single resampling pass.
    """

    def __init__(self, density: float, tolerance: float):
        self.density = density
        self.tolerance = tolerance
        self.points: List[UniformPoint] = []
        self.distances: List[float] = []
        self.ranges: List[SegmentIndexRange] = []
        self.range_start = 0

    def keep(self, point: UniformPoint, distance: float) -> None:
        self.points.append(point)
        self.distances.append(distance)

    def close_segment(self, segment_index: int, end: Sample) -> None:
        """Reconcile the end of a segment with the kept points and record its range."""
        if end.distance - self.distances[-1] >= self.density - self.tolerance:
            self.keep(UniformPoint(end.position, end.heading, is_last=True), end.distance)
        else:
            self._merge(segment_index, end)
        self.finish_range(segment_index)

    def _merge(self, segment_index: int, end: Sample) -> None:
        last = self.points[-1]
        if last.heading is None:
            last.heading = end.heading
        elif not last.is_last and end.heading is not None:
            logger.debug(
                f"End of segment {segment_index} merged into point {len(self.points) - 1}, "
                f"keeping heading {last.heading} "
                f"(rotation {derivative_heading(last.heading, end.heading)} dropped)"
            )
        last.is_last = True

    def finish_range(self, segment_index: int) -> None:
        self.ranges.append(SegmentIndexRange(segment_index, self.range_start, len(self.points)))
        self.range_start = len(self.points)


class UniformResampler:
    """
    Reduces a dense sample cloud to points spaced by a density.
    """

    def __init__(self, tolerance: Optional[float] = None):
        """
        Initialize the resampler.

        Args:
            tolerance: Absolute tolerance for arc-length comparisons,
                None for the configured sampling.tolerance
        """
        if tolerance is None:
            tolerance = config_manager.get("sampling", "tolerance", 1e-6)
        self.tolerance = float(tolerance)

    @timed("uniform_resampling")
    @log_exceptions("resampling")
    def resample(self, sample_result: PathSampleResult, density: Optional[float] = None) -> ResampleResult:
        """
        Resample a sampled path at the given density.

        Args:
            sample_result: Output of PathSampler.sample_path
            density: Spacing between uniform points, in path units; None for
                the configured sampling.density

        Returns:
            ResampleResult: Uniform points and one index range per segment

        Raises:
            InvalidDensityError: If density is not positive
        """
        density = check_density(density)
        if not len(sample_result):
            return ResampleResult()

        tolerance = self.tolerance
        distances = sample_result.distances
        segment_ends = sample_result.segment_ends()
        final_segment = len(segment_ends) - 1

        count = max(int(math.floor(sample_result.arc_length / density + 0.5 + tolerance)), 1)
        targets = np.arange(count) * density

        # Each grid point lies on the chord ending at the first sample at or
        # beyond it; the first chord is the lowest candidate
        after = np.clip(np.searchsorted(distances, targets - tolerance, side='left'),
                        1, len(distances) - 1)
        before = after - 1
        span = distances[after] - distances[before]
        ratio = np.divide(targets - distances[before], span, out=np.zeros(count), where=span > 0)
        np.clip(ratio, 0.0, 1.0, out=ratio)
        start = sample_result.positions[before]
        grid = start + (sample_result.positions[after] - start) * ratio[:, None]
        owners = sample_result.segments[before]

        builder = _UniformPointBuilder(density, tolerance)
        first = sample_result.sample(0)
        current = first.segment_index

        for i, (target, owner, (x, y)) in enumerate(zip(targets.tolist(), owners.tolist(), grid.tolist())):
            if owner > current:
                builder.close_segment(current, sample_result.sample(segment_ends[current]))
                current += 1
                if builder.distances[-1] >= target - tolerance:
                    # The end just kept already sits on this grid distance
                    continue

            if i == 0:
                builder.keep(UniformPoint(first.position, first.heading), 0.0)
            else:
                builder.keep(UniformPoint(Point2D(x, y)), target)

        while current < final_segment:
            builder.close_segment(current, sample_result.sample(segment_ends[current]))
            current += 1

        end = sample_result.sample(segment_ends[final_segment])
        builder.keep(UniformPoint(end.position, end.heading, is_last=True), end.distance)
        builder.finish_range(final_segment)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Resampled {len(sample_result)} samples into {len(builder.points)} points "
                f"at density {density}"
            )

        return ResampleResult(points=builder.points, segment_indexes=builder.ranges)


def get_uniform_points_from_samples(sample_result: PathSampleResult,
                                    density: Optional[float] = None) -> ResampleResult:
    return UniformResampler().resample(sample_result, density)


def get_path_points(path: Path, density: Optional[float] = None, step_count: Optional[int] = None) -> ResampleResult:
    """
    Sample a path and resample it uniformly in one call.

    Args:
        path: Path to discretize
        density: Spacing between uniform points, None for the configured sampling.density
        step_count: Parameter subdivisions per segment, None for the configured default

    Returns:
        ResampleResult: Uniform points and per-segment index ranges
    """
    density = check_density(density)
    sample_result = PathSampler(step_count).sample_path(path, density)
    return UniformResampler().resample(sample_result, density)
