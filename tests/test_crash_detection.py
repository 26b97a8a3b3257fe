"""Tests for crash detection against cars and obstacles."""

import numpy as np
import pytest

from lane_racer.config import load_parameters
from lane_racer.core.background import initialize_background
from lane_racer.core.car import PLAYER, Car
from lane_racer.core.crash_detection import (
    FRONT,
    LEFT,
    RIGHT,
    crash_detected,
    crash_detected_while_driving,
    spans_collide,
)
from lane_racer.core.race import ONGOING, Race
from lane_racer.core.track_items import Obstacle

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_CAR_LENGTH: float = 110.0


def _player(y: float, x: float = 20.0, distance: float = 0.0) -> Car:
    return Car(
        car_id=1,
        x_position=x,
        y_position=y,
        controller=PLAYER,
        distance_travelled=distance,
    )


def _ai(y: float, x: float = 20.0, car_id: int = 2) -> Car:
    return Car(car_id=car_id, x_position=x, y_position=y, speed="low")


def _make_race(
    player: Car,
    ai_cars: tuple[Car, ...] = (),
    obstacles: tuple[Obstacle, ...] = (),
) -> Race:
    parameters = load_parameters()
    return Race(
        parameters=parameters,
        player_car=player,
        ai_cars=ai_cars,
        obstacles=obstacles,
        speed_boosts=(),
        background=initialize_background(parameters, np.random.default_rng(0)),
        status=ONGOING,
    )


# ---------------------------------------------------------------------------
# Span predicate
# ---------------------------------------------------------------------------


def test_spans_at_same_position_collide() -> None:
    assert spans_collide(100.0, _CAR_LENGTH, 100.0, _CAR_LENGTH)


def test_touching_spans_collide_both_ways() -> None:
    assert spans_collide(100.0, _CAR_LENGTH, 210.0, _CAR_LENGTH)
    assert spans_collide(210.0, _CAR_LENGTH, 100.0, _CAR_LENGTH)


def test_overlapping_spans_collide() -> None:
    assert spans_collide(100.0, _CAR_LENGTH, 150.0, _CAR_LENGTH)
    assert spans_collide(150.0, _CAR_LENGTH, 100.0, _CAR_LENGTH)


def test_separate_spans_do_not_collide() -> None:
    assert not spans_collide(100.0, _CAR_LENGTH, 211.0, _CAR_LENGTH)
    assert not spans_collide(211.0, _CAR_LENGTH, 100.0, _CAR_LENGTH)


def test_spans_with_different_lengths() -> None:
    assert spans_collide(0.0, 110.0, 110.0, 50.0)
    assert spans_collide(160.0, 110.0, 110.0, 50.0)
    assert not spans_collide(161.0, 110.0, 110.0, 50.0)


# ---------------------------------------------------------------------------
# Car against car
# ---------------------------------------------------------------------------


def test_front_touching_car_is_a_crash() -> None:
    """Car length 110: A at 100 and B at 210 touch."""
    race = _make_race(_player(100.0), ai_cars=(_ai(210.0),))
    assert crash_detected(race, race.player_car, FRONT)


def test_front_one_pixel_gap_is_clear() -> None:
    race = _make_race(_player(100.0), ai_cars=(_ai(211.0),))
    assert not crash_detected(race, race.player_car, FRONT)


def test_front_crash_only_once_spans_meet() -> None:
    """Moving towards a car ahead crashes exactly from the touching point."""
    for y in range(0, 211):
        race = _make_race(_player(float(y)), ai_cars=(_ai(210.0),))
        expected = y + _CAR_LENGTH >= 210.0
        assert crash_detected(race, race.player_car, FRONT) == expected, y


def test_front_ignores_cars_behind() -> None:
    race = _make_race(_player(100.0), ai_cars=(_ai(-10.0),))
    assert not crash_detected(race, race.player_car, FRONT)


def test_front_same_position_is_a_crash() -> None:
    race = _make_race(_player(100.0), ai_cars=(_ai(100.0),))
    assert crash_detected(race, race.player_car, FRONT)


def test_other_lane_cars_never_crash() -> None:
    race = _make_race(_player(100.0), ai_cars=(_ai(150.0, x=115.0),))
    assert not crash_detected(race, race.player_car, FRONT)


def test_steering_beside_a_touching_car_is_a_crash() -> None:
    """B steers into A's lane at y=210 with A at y=100."""
    race = _make_race(_player(210.0, x=115.0), ai_cars=(_ai(100.0, x=115.0),))
    assert crash_detected(race, race.player_car, RIGHT)


def test_steering_with_a_gap_is_clear() -> None:
    race = _make_race(_player(211.0, x=115.0), ai_cars=(_ai(100.0, x=115.0),))
    assert not crash_detected(race, race.player_car, RIGHT)


def test_steering_into_a_car_behind_is_a_crash() -> None:
    race = _make_race(_player(100.0, x=115.0), ai_cars=(_ai(40.0, x=115.0),))
    assert crash_detected(race, race.player_car, LEFT)


def test_querying_car_is_excluded() -> None:
    ai_car = _ai(300.0)
    race = _make_race(_player(5.0, x=115.0), ai_cars=(ai_car,))
    assert not crash_detected(race, ai_car, FRONT)


# ---------------------------------------------------------------------------
# Leaving the track
# ---------------------------------------------------------------------------


def test_steering_off_the_track_is_a_crash() -> None:
    race = _make_race(_player(5.0, x=-75.0))
    assert crash_detected(race, race.player_car, LEFT)


def test_steering_past_the_last_lane_is_a_crash() -> None:
    race = _make_race(_player(5.0, x=230.0))
    assert crash_detected(race, race.player_car, RIGHT)


def test_out_of_track_ignores_other_entities() -> None:
    race = _make_race(_player(5.0, x=305.0), ai_cars=(_ai(900.0, x=210.0),))
    assert crash_detected(race, race.player_car, RIGHT)


# ---------------------------------------------------------------------------
# Car against obstacle
# ---------------------------------------------------------------------------


def test_touching_obstacle_is_a_crash() -> None:
    race = _make_race(_player(50.0), obstacles=(Obstacle(20.0, 160.0),))
    assert crash_detected(race, race.player_car, FRONT)


def test_obstacle_with_gap_is_clear() -> None:
    race = _make_race(_player(50.0), obstacles=(Obstacle(20.0, 161.0),))
    assert not crash_detected(race, race.player_car, FRONT)


def test_obstacle_position_follows_player_progress() -> None:
    """Obstacle at 660 shows at 160 once the player has travelled 500."""
    race = _make_race(
        _player(50.0, distance=500.0), obstacles=(Obstacle(20.0, 660.0),)
    )
    assert crash_detected(race, race.player_car, FRONT)


def test_obstacle_in_other_lane_is_clear() -> None:
    race = _make_race(_player(50.0), obstacles=(Obstacle(115.0, 100.0),))
    assert not crash_detected(race, race.player_car, FRONT)


def test_passed_obstacle_ignored_moving_forward() -> None:
    race = _make_race(_player(5.0), obstacles=(Obstacle(20.0, 0.0),))
    assert not crash_detected(race, race.player_car, FRONT)


def test_steering_onto_an_obstacle_is_a_crash() -> None:
    """Lateral checks consider every same-lane obstacle."""
    race = _make_race(_player(5.0, x=115.0), obstacles=(Obstacle(115.0, 0.0),))
    assert crash_detected(race, race.player_car, RIGHT)


def test_unknown_side_rejected() -> None:
    race = _make_race(_player(5.0))
    with pytest.raises(ValueError, match="side must be one of"):
        crash_detected(race, race.player_car, "back")


# ---------------------------------------------------------------------------
# Driving a whole step
# ---------------------------------------------------------------------------


def test_obstacle_jumped_within_one_step_is_a_crash() -> None:
    obstacle = Obstacle(20.0, 125.0)
    before = _make_race(_player(5.0), obstacles=(obstacle,))
    after = _make_race(_player(5.0, distance=150.0), obstacles=(obstacle,))
    # At rest on both sides of the step the spans are apart.
    assert not crash_detected(after, after.player_car, FRONT)
    assert crash_detected_while_driving(before, after, after.player_car)


def test_car_jumped_within_one_step_is_a_crash() -> None:
    before = _make_race(_player(5.0), ai_cars=(_ai(120.0),))
    after = _make_race(_player(5.0, distance=150.0), ai_cars=(_ai(-30.0),))
    assert not crash_detected(after, after.player_car, FRONT)
    assert crash_detected_while_driving(before, after, after.player_car)


def test_step_stopping_short_of_obstacle_is_clear() -> None:
    obstacle = Obstacle(20.0, 400.0)
    before = _make_race(_player(5.0), obstacles=(obstacle,))
    after = _make_race(_player(5.0, distance=150.0), obstacles=(obstacle,))
    assert not crash_detected_while_driving(before, after, after.player_car)


def test_step_ignores_items_already_behind() -> None:
    obstacle = Obstacle(20.0, 0.0)
    before = _make_race(_player(5.0), obstacles=(obstacle,))
    after = _make_race(_player(5.0, distance=150.0), obstacles=(obstacle,))
    assert not crash_detected_while_driving(before, after, after.player_car)


def test_step_ignores_other_lanes() -> None:
    obstacle = Obstacle(115.0, 125.0)
    before = _make_race(_player(5.0), obstacles=(obstacle,))
    after = _make_race(_player(5.0, distance=150.0), obstacles=(obstacle,))
    assert not crash_detected_while_driving(before, after, after.player_car)
