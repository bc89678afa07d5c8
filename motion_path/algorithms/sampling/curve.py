"""
Bezier curve evaluation for path segments.

Evaluates line, quadratic and cubic segments in the Bernstein basis, both
for a single parameter and vectorized over many parameters and segments
with numpy.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from motion_path.utils.geo.coordinates import Point2D
from motion_path.utils.math.vectors import Vector2D
from motion_path.domain.path.path import Segment
from motion_path.domain.path.errors import MalformedSegmentError
from motion_path.algorithms.sampling.heading import normalize_heading

# Binomial coefficients of the Bernstein basis, keyed by control count;
# the single-control entry serves the derivative of a line
_BERNSTEIN_COEFFICIENTS = {
    1: np.array([1.0]),
    2: np.array([1.0, 1.0]),
    3: np.array([1.0, 2.0, 1.0]),
    4: np.array([1.0, 3.0, 3.0, 1.0]),
}


def _control_array(segment: Segment) -> np.ndarray:
    """
    Control positions of a segment as an (n, 2) array.

    Raises:
        MalformedSegmentError: If the segment does not have 2, 3 or 4 controls
    """
    count = len(segment.controls)
    if count not in (2, 3, 4):
        raise MalformedSegmentError(f"Cannot evaluate a segment with {count} controls")
    return np.array([(c.x, c.y) for c in segment.controls], dtype=float)


def _check_parameter(t: float) -> None:
    if not 0.0 <= t <= 1.0:
        raise ValueError(f"Curve parameter must be within [0, 1], got {t}")


def _check_parameters(ts: Sequence[float]) -> np.ndarray:
    ts = np.asarray(ts, dtype=float)
    if not np.all((ts >= 0.0) & (ts <= 1.0)):
        raise ValueError("Curve parameters must be within [0, 1]")
    return ts


def bernstein_basis(control_count: int, ts: np.ndarray) -> np.ndarray:
    """
    Bernstein basis matrix.

    Args:
        control_count: Number of controls (degree + 1)
        ts: Parameters, shape (N,)

    Returns:
        np.ndarray: Shape (N, control_count); row k holds the weights at ts[k]
    """
    degree = control_count - 1
    i = np.arange(control_count)
    ts = np.asarray(ts, dtype=float)[:, None]
    # 0.0 ** 0 == 1.0, so t = 0 and t = 1 select the endpoint controls exactly
    return _BERNSTEIN_COEFFICIENTS[control_count] * (1.0 - ts) ** (degree - i) * ts ** i


def evaluate_segments(segments: Sequence[Segment], ts: Sequence[float]) -> np.ndarray:
    """
    Evaluate several segments at the same parameters.

    Segments with the same control count go through one matrix product.

    Args:
        segments: Segments to evaluate
        ts: Parameters in [0, 1]

    Returns:
        np.ndarray: Positions, shape (len(segments), len(ts), 2)

    Raises:
        MalformedSegmentError: If a segment does not have 2, 3 or 4 controls
        ValueError: If a parameter is outside [0, 1]
    """
    ts = _check_parameters(ts)
    positions = np.empty((len(segments), len(ts), 2))

    groups: Dict[int, List[np.ndarray]] = {}
    members: Dict[int, List[int]] = {}
    for index, segment in enumerate(segments):
        controls = _control_array(segment)
        groups.setdefault(len(controls), []).append(controls)
        members.setdefault(len(controls), []).append(index)

    for control_count, controls in groups.items():
        positions[members[control_count]] = bernstein_basis(control_count, ts) @ np.stack(controls)

    return positions


def evaluate_many(segment: Segment, ts: Sequence[float]) -> np.ndarray:
    """
    Evaluate a segment at many parameters at once.

    Returns:
        np.ndarray: Positions, shape (len(ts), 2)

    Raises:
        MalformedSegmentError: If the segment does not have 2, 3 or 4 controls
        ValueError: If a parameter is outside [0, 1]
    """
    return evaluate_segments([segment], ts)[0]


def evaluate(segment: Segment, t: float) -> Point2D:
    """
    Evaluate a segment at parameter t.

    Args:
        segment: Segment to evaluate
        t: Curve parameter in [0, 1]

    Returns:
        Point2D: Position on the curve

    Raises:
        MalformedSegmentError: If the segment does not have 2, 3 or 4 controls
        ValueError: If t is outside [0, 1]
    """
    controls = _control_array(segment)
    _check_parameter(t)

    if t == 0.0:
        return Point2D(*controls[0])
    if t == 1.0:
        return Point2D(*controls[-1])

    x, y = (bernstein_basis(len(controls), [t]) @ controls)[0]
    return Point2D(x, y)


def derivative(segment: Segment, t: float) -> Vector2D:
    """
    First derivative (hodograph) of a segment at parameter t.

    The derivative of a degree n Bezier curve is a degree n - 1 curve over
    the control differences scaled by n.
    """
    controls = _control_array(segment)
    _check_parameter(t)

    degree = len(controls) - 1
    differences = degree * np.diff(controls, axis=0)
    dx, dy = (bernstein_basis(degree, [t]) @ differences)[0]
    return Vector2D(dx, dy)


def tangent_heading(segment: Segment, t: float) -> Optional[float]:
    """
    Compass heading of the curve direction at t, in degrees.

    Returns:
        Optional[float]: Heading in [0, 360), or None where the tangent vanishes
    """
    heading = derivative(segment, t).heading()
    return None if heading is None else normalize_heading(heading)
