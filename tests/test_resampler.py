import math
import time

import pytest

from conftest import straight_path, assert_points, ranges_of
from motion_path.domain.path.controls import ControlPoint
from motion_path.domain.path.path import Path
from motion_path.utils.geo.coordinates import Point2D
from motion_path.utils.config import config_manager
from motion_path.algorithms.sampling.common import InvalidDensityError, PathSampleResult
from motion_path.algorithms.sampling.path_sampler import get_path_sample_points
from motion_path.algorithms.sampling.resampler import (
    UniformResampler, get_path_points, get_uniform_points_from_samples
)

DENSITY = 2


def resample(path, density=DENSITY):
    samples = get_path_sample_points(path, density)
    return get_uniform_points_from_samples(samples, density)


def test_one_segment_six_units():
    result = resample(straight_path((60, 0), (66, 90)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, None, False),
        (64, 60, None, False),
        (66, 60, 90, True),
    ])
    assert ranges_of(result) == [(0, 0, 4)]


def test_one_segment_without_displacement():
    result = resample(straight_path((60, 0), (60, 90)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (60, 60, 90, True),
    ])
    assert ranges_of(result) == [(0, 0, 2)]


@pytest.mark.parametrize("end_x", [61, 62])
def test_one_segment_not_longer_than_density(end_x):
    result = resample(straight_path((60, 0), (end_x, 90)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (end_x, 60, 90, True),
    ])
    assert ranges_of(result) == [(0, 0, 2)]


def test_one_segment_three_units():
    result = resample(straight_path((60, 0), (63, 90)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, None, False),
        (63, 60, 90, True),
    ])
    assert ranges_of(result) == [(0, 0, 3)]


def test_two_segments_without_displacement():
    result = resample(straight_path((60, 0), (60, 90), (60, 180)))
    assert_points(result.points, [
        (60, 60, 0, True),
        (60, 60, 180, True),
    ])
    assert ranges_of(result) == [(0, 0, 1), (1, 1, 2)]


def test_two_segments_end_one_density_away_is_kept():
    result = resample(straight_path((60, 0), (62, 90), (62, 180)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, 90, True),
        (62, 60, 180, True),
    ])
    assert ranges_of(result) == [(0, 0, 2), (1, 2, 3)]


def test_two_segments_close_end_is_merged():
    result = resample(straight_path((60, 0), (63, 90), (63, 180)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, 90, True),
        (63, 60, 180, True),
    ])
    assert ranges_of(result) == [(0, 0, 2), (1, 2, 3)]


def test_three_segments_short_middle_segment_has_empty_range():
    result = resample(straight_path((60, 0), (62, 90), (63, 180), (64, 270)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, 90, True),
        (64, 60, 270, True),
    ])
    assert ranges_of(result) == [(0, 0, 2), (1, 2, 2), (2, 2, 3)]
    assert result.segment_indexes[1].is_empty


def test_three_segments_five_units():
    result = resample(straight_path((60, 0), (62, 90), (63, 180), (65, 270)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, 90, True),
        (64, 60, 180, True),
        (65, 60, 270, True),
    ])
    assert ranges_of(result) == [(0, 0, 2), (1, 2, 3), (2, 3, 4)]


def test_three_segments_seven_units():
    result = resample(straight_path((60, 0), (65, 90), (66, 180), (67, 270)))
    assert_points(result.points, [
        (60, 60, 0, False),
        (62, 60, None, False),
        (64, 60, 90, True),
        (66, 60, 180, True),
        (67, 60, 270, True),
    ])
    assert ranges_of(result) == [(0, 0, 3), (1, 3, 4), (2, 4, 5)]


def test_curved_segment_after_line(curved_path):
    samples = get_path_sample_points(curved_path, DENSITY)
    result = get_uniform_points_from_samples(samples, DENSITY)

    assert len(result.points) == 62
    assert_points(result.points[:1], [(0, 0, 0, False)])
    assert_points(result.points[-1:], [(40, 60, 0, True)])
    assert_points(result.points[5:6], [(10, 0, 0, True)])
    assert ranges_of(result) == [(0, 0, 6), (1, 6, 62)]


def test_density_points_are_spaced_by_density(curved_path):
    result = get_path_points(curved_path, DENSITY)
    interior = result.points[:-1]
    for a, b in zip(interior, interior[1:]):
        # chords of a curve are never longer than the arc between them
        assert math.hypot(a.x - b.x, a.y - b.y) <= DENSITY + 1e-6


def test_resample_is_deterministic(curved_path):
    samples = get_path_sample_points(curved_path, DENSITY)
    resampler = UniformResampler()
    first = resampler.resample(samples, DENSITY)
    second = resampler.resample(samples, DENSITY)
    assert first == second


def test_ranges_partition_the_output(curved_path):
    curved_path.add_segment(ControlPoint(41, 60, 45))
    curved_path.add_segment(ControlPoint(41, 60, 90))
    result = get_path_points(curved_path, DENSITY)

    ranges = result.segment_indexes
    assert [r.segment_index for r in ranges] == list(range(len(curved_path)))
    assert ranges[0].start == 0
    assert ranges[-1].end == len(result.points)
    for previous, following in zip(ranges, ranges[1:]):
        assert previous.end == following.start
        assert previous.start <= previous.end


def test_every_range_ends_on_terminal_point(curved_path):
    result = get_path_points(curved_path, DENSITY)
    for index_range in result.segment_indexes:
        if not index_range.is_empty:
            assert result.points[index_range.end - 1].is_last
    assert result.points_of_segment(0)[-1].heading == 0


def test_final_point_is_path_end(curved_path):
    result = get_path_points(curved_path, 5)
    last = result.points[-1]
    assert last.is_last
    assert last.heading == curved_path.end_point.heading
    end = curved_path.end_point
    assert last.position == Point2D(end.x, end.y)


def test_empty_path_gives_empty_result():
    result = get_path_points(Path(), DENSITY)
    assert result.points == []
    assert result.segment_indexes == []


def test_empty_sample_result_gives_empty_result():
    result = UniformResampler().resample(PathSampleResult(), DENSITY)
    assert result.points == []
    assert result.segment_indexes == []


@pytest.mark.parametrize("density", [0, -2, float("nan")])
def test_invalid_density_is_rejected(density):
    samples = get_path_sample_points(straight_path((60, 0), (66, 90)), DENSITY)
    with pytest.raises(InvalidDensityError):
        UniformResampler().resample(samples, density)


def test_density_defaults_to_configured_value():
    path = straight_path((60, 0), (66, 90))
    try:
        config_manager.set("sampling", "density", 3.0)
        result = get_path_points(path)
    finally:
        config_manager.reset()
    assert_points(result.points, [
        (60, 60, 0, False),
        (63, 60, None, False),
        (66, 60, 90, True),
    ])
    assert ranges_of(result) == [(0, 0, 3)]


def test_explicit_density_wins_over_configured_value():
    path = straight_path((60, 0), (66, 90))
    try:
        config_manager.set("sampling", "density", 3.0)
        result = get_path_points(path, DENSITY)
    finally:
        config_manager.reset()
    assert len(result.points) == 4


def test_many_cubic_segments_keep_contiguous_ranges(long_cubic_path):
    result = get_path_points(long_cubic_path, DENSITY)
    ranges = result.segment_indexes
    assert len(ranges) == len(long_cubic_path)
    assert ranges[-1].end == len(result.points)
    assert all(a.end == b.start for a, b in zip(ranges, ranges[1:]))
    end = long_cubic_path.end_point
    assert result.points[-1].position == Point2D(end.x, end.y)


def test_resampling_thirty_cubic_segments_is_interactive(long_cubic_path):
    get_path_points(long_cubic_path, DENSITY)
    runs = 50
    started = time.perf_counter()
    for _ in range(runs):
        get_path_points(long_cubic_path, DENSITY)
    per_call = (time.perf_counter() - started) / runs
    # 10 ms ceiling
    assert per_call < 0.01
