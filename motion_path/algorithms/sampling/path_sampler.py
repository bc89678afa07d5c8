"""
Dense sampling of a whole path.

Concatenates the per-segment polylines into one sequence indexed by
cumulative arc length. The boundary point between two segments is kept
twice, once as the last sample of the earlier segment and once as the first
sample of the later one; the resampler relies on both copies.
"""

import logging
from typing import Optional

import numpy as np

from motion_path.domain.path.path import Path
from motion_path.utils.logger import get_logger, timed, log_exceptions
from motion_path.algorithms.sampling.common import PathSampleResult, check_density
from motion_path.algorithms.sampling.segment_sampler import SegmentSampler

logger = get_logger("sampling")


class PathSampler:
    """
    Samples every segment of a path with one SegmentSampler.
    """

    def __init__(self, step_count: Optional[int] = None):
        """
        Initialize the path sampler.

        Args:
            step_count: Parameter subdivisions per segment, None for the configured default
        """
        self.segment_sampler = SegmentSampler(step_count)

    @property
    def step_count(self) -> int:
        return self.segment_sampler.step_count

    @timed("path_sampling")
    @log_exceptions("sampling")
    def sample_path(self, path: Path, density: Optional[float] = None) -> PathSampleResult:
        """
        Sample a path into an arc-length-indexed point sequence.

        Args:
            path: Path to sample
            density: Uniform point spacing the result is meant for, None for sampling.density

        Returns:
            PathSampleResult: Samples, total arc length and segment count

        Raises:
            InvalidDensityError: If density is not positive
            MalformedSegmentError: If a segment has an invalid control layout
            PathContinuityError: If the segment chain is broken
        """
        density = check_density(density)
        path.validate()

        segments = path.segments
        if not segments:
            return PathSampleResult()

        ts, positions, local = self.segment_sampler.sample_many(segments)
        count, per_segment = local.shape

        # Running sum of whole-segment lengths, in path order
        offsets = np.concatenate(([0.0], np.cumsum(local[:, -1])))
        result = PathSampleResult(
            positions=positions.reshape(-1, 2),
            distances=(local + offsets[:-1, None]).ravel(),
            segments=np.repeat(np.arange(count), per_segment),
            ts=np.tile(ts, count),
            endpoint_headings=[(s.first.heading, s.last.heading) for s in segments],
            arc_length=float(offsets[-1]),
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Sampled {count} segments into {len(result)} points, "
                f"arc length {result.arc_length:.4f}, "
                f"about {int(result.arc_length / density) + 1} uniform points"
            )

        return result


def get_path_sample_points(path: Path, density: Optional[float] = None, step_count: Optional[int] = None) -> PathSampleResult:
    """
    Sample a path with a one-off PathSampler.

    Args:
        path: Path to sample
        density: Uniform point spacing the result is meant for, None for sampling.density
        step_count: Parameter subdivisions per segment, None for the configured default

    Returns:
        PathSampleResult: Samples, total arc length and segment count
    """
    return PathSampler(step_count).sample_path(path, density)
