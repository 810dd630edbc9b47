import math

import pytest

from sample_planner.utils.geometry import (
    bearing,
    bresenham_line,
    distance,
    polyline_length,
    round_to_cell,
    step_toward,
)


def test_distance_and_bearing():
    assert distance((0, 0), (3, 4)) == 5.0
    assert bearing((0, 0), (0, 2)) == pytest.approx(math.pi / 2)
    assert bearing((1, 1), (0, 1)) == pytest.approx(math.pi)


def test_bresenham_includes_both_ends():
    assert bresenham_line(0, 0, 3, 1) == [(0, 0), (1, 0), (2, 1), (3, 1)]
    assert bresenham_line(2, 2, 2, 2) == [(2, 2)]
    assert bresenham_line(0, 3, 0, 0) == [(0, 3), (0, 2), (0, 1), (0, 0)]


def test_bresenham_visits_every_column_of_a_steep_line():
    cells = bresenham_line(0, 0, 3, 9)
    assert {x for x, _ in cells} == {0, 1, 2, 3}
    assert [y for _, y in cells] == list(range(10))


@pytest.mark.parametrize('target', [(10, 10), (-7, 3), (0, -12), (9, -1)])
def test_step_toward_never_exceeds_step(target):
    cell = step_toward((5, 5), target, 5.0)
    assert all(isinstance(c, int) for c in cell)
    assert distance((5, 5), cell) <= 5.0


def test_step_toward_travels_the_full_step_when_a_cell_allows_it():
    assert step_toward((0, 0), (20, 0), 5.0) == (5, 0)
    assert step_toward((0, 0), (10, 10), 5.0) in {(3, 4), (4, 3)}
    assert distance((0, 0), step_toward((0, 0), (10, 10), 5.0)) == 5.0


def test_short_steps_do_not_collapse_onto_the_origin():
    assert step_toward((0, 0), (10, 1), 1.0) == (1, 0)
    assert step_toward((4, 4), (4, -6), 1.0) == (4, 3)
    assert step_toward((0, 0), (10, 10), 1.0) in {(0, 1), (1, 0)}


def test_round_to_cell_rounds_halves_up():
    assert round_to_cell(0.5, 1.5) == (1, 2)
    assert round_to_cell(2.49, -0.6) == (2, -1)


def test_polyline_length():
    assert polyline_length([(0, 0), (3, 4), (3, 10)]) == 11.0
    assert polyline_length([(1, 1)]) == 0.0
