"""
Path representation for the motion path editor.

A path is a chain of Bezier segments. Consecutive segments share their
boundary endpoint control by reference, so moving that control in the
editor moves both segments.
"""

from enum import Enum
from typing import List, Sequence, Iterator, Optional

from motion_path.domain.path.controls import ControlPoint
from motion_path.domain.path.errors import MalformedSegmentError, PathContinuityError


class SegmentType(Enum):
    """Bezier basis of a segment, valued by its control count."""
    LINEAR = 2
    QUADRATIC = 3
    CUBIC = 4


class Segment:
    """
    One Bezier segment: an endpoint control, zero to two interior controls
    and a closing endpoint control.
    """

    def __init__(self, first: ControlPoint, interior: Sequence[ControlPoint], last: ControlPoint):
        """
        Initialize a segment.

        Args:
            first: Leading endpoint control
            interior: Interior controls (0 to 2)
            last: Trailing endpoint control

        Raises:
            MalformedSegmentError: If the controls do not form a line, quadratic or cubic
        """
        self.controls: List[ControlPoint] = [first, *interior, last]
        check_segment_controls(self.controls)

    def __repr__(self) -> str:
        return f"Segment({self.segment_type.name}, {self.first!r} -> {self.last!r})"

    def __len__(self) -> int:
        return len(self.controls)

    @property
    def first(self) -> ControlPoint:
        return self.controls[0]

    @property
    def last(self) -> ControlPoint:
        return self.controls[-1]

    @property
    def interior(self) -> List[ControlPoint]:
        return self.controls[1:-1]

    @property
    def segment_type(self) -> SegmentType:
        """
        Basis of the segment.

        Raises:
            MalformedSegmentError: If the control list was mutated to an invalid size
        """
        try:
            return SegmentType(len(self.controls))
        except ValueError:
            raise MalformedSegmentError(
                f"A segment needs 2 to 4 controls, got {len(self.controls)}") from None


def check_segment_controls(controls: Sequence[ControlPoint]) -> None:
    """
    Validate the control layout of a segment.

    Raises:
        MalformedSegmentError: On a bad control count, or when the boundary
            controls lack a heading or an interior control carries one
    """
    if len(controls) not in (2, 3, 4):
        raise MalformedSegmentError(f"A segment needs 2 to 4 controls, got {len(controls)}")
    if not controls[0].is_endpoint or not controls[-1].is_endpoint:
        raise MalformedSegmentError("Segment must start and end with endpoint controls")
    if any(c.is_endpoint for c in controls[1:-1]):
        raise MalformedSegmentError("Interior controls must not carry a heading")


class Path:
    """
    Ordered chain of segments.

    Invariant: segments[i].last is segments[i + 1].first.
    """

    def __init__(self, *segments: Segment, name: str = "Path", metadata: Optional[dict] = None):
        """
        Initialize a path.

        Args:
            segments: Segments in path order
            name: Display name of the path
            metadata: Optional metadata dictionary
        """
        self.segments: List[Segment] = list(segments)
        self.name = name
        self.metadata = metadata or {}

    def __len__(self) -> int:
        """Number of segments in the path."""
        return len(self.segments)

    def __getitem__(self, index) -> Segment:
        return self.segments[index]

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __repr__(self) -> str:
        return f"Path({self.name!r}, {len(self.segments)} segments)"

    @property
    def start_point(self) -> ControlPoint:
        """First endpoint control of the path."""
        if not self.segments:
            raise ValueError("Path is empty")
        return self.segments[0].first

    @property
    def end_point(self) -> ControlPoint:
        """Last endpoint control of the path."""
        if not self.segments:
            raise ValueError("Path is empty")
        return self.segments[-1].last

    @property
    def controls(self) -> List[ControlPoint]:
        """Every control of the path once, shared endpoints included a single time."""
        result: List[ControlPoint] = []
        for segment in self.segments:
            start = 1 if result and result[-1] is segment.first else 0
            result.extend(segment.controls[start:])
        return result

    def add_segment(self, end: ControlPoint, interior: Sequence[ControlPoint] = ()) -> Segment:
        """
        Append a segment starting at the current end of the path.

        Args:
            end: Trailing endpoint control of the new segment
            interior: Interior controls of the new segment

        Returns:
            Segment: The appended segment

        Raises:
            ValueError: If the path has no segment to continue from
        """
        if not self.segments:
            raise ValueError("Cannot continue an empty path, construct it with a first segment")
        segment = Segment(self.segments[-1].last, interior, end)
        self.segments.append(segment)
        return segment

    def validate(self) -> None:
        """
        Check every segment and the shared-endpoint chain.

        Raises:
            MalformedSegmentError: If a segment has an invalid control layout
            PathContinuityError: If two consecutive segments do not share their boundary control
        """
        for segment in self.segments:
            check_segment_controls(segment.controls)

        for i in range(len(self.segments) - 1):
            if self.segments[i].last is not self.segments[i + 1].first:
                raise PathContinuityError(
                    f"Segment {i} does not end on the first control of segment {i + 1}")
