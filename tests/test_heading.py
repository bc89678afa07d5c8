import pytest

from motion_path.algorithms.sampling.heading import (
    derivative_heading, normalize_heading
)


@pytest.mark.parametrize("from_heading, to_heading, expected", [
    (0, 90, 90),
    (90, 0, -90),
    (350, 10, 20),
    (10, 350, -20),
    (0, 180, -180),
    (180, 0, -180),
    (270, 90, -180),
    (0, 0, 0),
    (45, 405, 0),
    (-90, 90, -180),
    (0, 179, 179),
    (0, 181, -179),
])
def test_derivative_heading(from_heading, to_heading, expected):
    assert derivative_heading(from_heading, to_heading) == pytest.approx(expected)


@pytest.mark.parametrize("heading, expected", [
    (0, 0),
    (360, 0),
    (-90, 270),
    (725, 5),
    (-1e-20, 0),
])
def test_normalize_heading(heading, expected):
    result = normalize_heading(heading)
    assert result == pytest.approx(expected)
    assert 0 <= result < 360
