import pytest

from motion_path.domain.path.controls import ControlPoint
from motion_path.domain.path.path import Path, Segment


def straight_path(start, *stops):
    """
    Chain of line segments along y = 60.

    start and every stop are (x, heading) pairs; each stop closes a segment.
    """
    x0, h0 = start
    x1, h1 = stops[0]
    path = Path(Segment(ControlPoint(x0, 60, h0), [], ControlPoint(x1, 60, h1)))
    for x, heading in stops[1:]:
        path.add_segment(ControlPoint(x, 60, heading))
    return path


def assert_points(points, expected):
    """Compare uniform points with (x, y, heading, is_last) tuples."""
    assert len(points) == len(expected)
    for point, (x, y, heading, is_last) in zip(points, expected):
        assert point.x == pytest.approx(x, abs=1e-9)
        assert point.y == pytest.approx(y, abs=1e-9)
        assert point.heading == heading
        assert point.is_last is is_last


def ranges_of(result):
    return [(r.segment_index, r.start, r.end) for r in result.segment_indexes]


@pytest.fixture
def curved_path():
    path = Path(Segment(ControlPoint(0, 0, 0), [], ControlPoint(10, 0, 0)))
    path.add_segment(
        ControlPoint(40, 60, 0),
        [ControlPoint(10, 103.71910889077459), ControlPoint(0, 80)],
    )
    return path


@pytest.fixture
def long_cubic_path():
    """Thirty chained S-shaped cubic segments, each spanning 10 units of x."""
    path = Path(Segment(
        ControlPoint(0, 0, 45), [ControlPoint(3, 8), ControlPoint(7, -8)], ControlPoint(10, 0, 45)
    ))
    for i in range(1, 30):
        x = 10 * i
        path.add_segment(ControlPoint(x + 10, 0, 45 if i % 2 else 135),
                         [ControlPoint(x + 3, 8), ControlPoint(x + 7, -8)])
    return path
