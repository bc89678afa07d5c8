"""
Fixed-resolution polyline approximation of a single segment.

The arc length of a segment is the sum of chord lengths between positions
sampled at uniform parameter steps. The error shrinks with the step count;
callers that compare lengths must use the same step count throughout.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from motion_path.domain.path.path import Segment
from motion_path.algorithms.sampling.curve import evaluate_segments
from motion_path.utils.config import config_manager


@dataclass
class SegmentSamples:
    """
    Polyline approximation of one segment.
    """
    ts: np.ndarray           # Parameters i / step_count, shape (N,)
    positions: np.ndarray    # Curve positions, shape (N, 2)
    distances: np.ndarray    # Cumulative chord length from the segment start, shape (N,)

    @property
    def arc_length(self) -> float:
        return float(self.distances[-1])

    def __len__(self) -> int:
        return len(self.ts)


def _check_step_count(step_count: int) -> int:
    if int(step_count) != step_count or step_count < 1:
        raise ValueError(f"Step count must be a positive integer, got {step_count}")
    return int(step_count)


def sample_segments(segments: Sequence[Segment], step_count: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Sample many segments at the same step_count + 1 parameters.

    Args:
        segments: Segments to sample
        step_count: Number of parameter subdivisions

    Returns:
        Tuple: ts of shape (N,), positions of shape (S, N, 2) and cumulative
            chord lengths from each segment start, shape (S, N)

    Raises:
        MalformedSegmentError: If a segment does not have 2, 3 or 4 controls
        ValueError: If step_count is not a positive integer
    """
    step_count = _check_step_count(step_count)

    # i / n rather than linspace so both ends are exactly 0.0 and 1.0
    ts = np.arange(step_count + 1, dtype=float) / step_count
    positions = evaluate_segments(segments, ts)

    steps = np.diff(positions, axis=1)
    distances = np.zeros(positions.shape[:2])
    np.cumsum(np.hypot(steps[..., 0], steps[..., 1]), axis=1, out=distances[:, 1:])

    return ts, positions, distances


def sample_segment(segment: Segment, step_count: int) -> SegmentSamples:
    """
    Sample a segment at step_count + 1 uniformly spaced parameters.

    Args:
        segment: Segment to sample
        step_count: Number of parameter subdivisions

    Returns:
        SegmentSamples: Parameters, positions and cumulative chord lengths

    Raises:
        MalformedSegmentError: If the segment does not have 2, 3 or 4 controls
        ValueError: If step_count is not a positive integer
    """
    ts, positions, distances = sample_segments([segment], step_count)
    return SegmentSamples(ts=ts, positions=positions[0], distances=distances[0])


def segment_arc_length(segment: Segment, step_count: int) -> float:
    """
    Polyline arc length of a segment.

    Args:
        segment: Segment to measure
        step_count: Number of parameter subdivisions

    Returns:
        float: Sum of chord lengths
    """
    return sample_segment(segment, step_count).arc_length


class SegmentSampler:
    """
    Segment sampler bound to one step count.

    The step count defaults to the configured sampling.step_count, so every
    measurement made through one sampler is consistent.
    """

    def __init__(self, step_count: Optional[int] = None):
        if step_count is None:
            step_count = config_manager.get("sampling", "step_count", 100)
        self.step_count = _check_step_count(step_count)

    def __repr__(self) -> str:
        return f"SegmentSampler(step_count={self.step_count})"

    def sample(self, segment: Segment) -> SegmentSamples:
        return sample_segment(segment, self.step_count)

    def arc_length(self, segment: Segment) -> float:
        return segment_arc_length(segment, self.step_count)

    def sample_many(self, segments: Sequence[Segment]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return sample_segments(segments, self.step_count)
