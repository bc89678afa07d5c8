"""
Exceptions raised while building or sampling motion paths.

All of them are fatal for the computation that raised them: the engine is
deterministic, so a retry on the same input fails the same way.
"""


class PathSamplingError(Exception):
    """Base exception for path model and sampling errors."""
    pass


class MalformedSegmentError(PathSamplingError):
    """Segment has a control count outside {2, 3, 4} or misplaced endpoints."""
    pass


class PathContinuityError(PathSamplingError):
    """Consecutive segments do not share their boundary control."""
    pass


class InvalidDensityError(PathSamplingError):
    """Resampling density is not a positive number."""
    pass
