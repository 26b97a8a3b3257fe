"""Tests for the race world state and its initialization."""

import numpy as np
import pytest

from lane_racer.config import load_parameters
from lane_racer.core.background import initialize_background
from lane_racer.core.car import AI, PLAYER, Car
from lane_racer.core.race import (
    ABORTED,
    COMPLETED,
    IDLE,
    ONGOING,
    Race,
    initialize_race,
    snapshot,
)
from lane_racer.core.track_items import Obstacle, SpeedBoost

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_race(
    player: Car,
    ai_cars: tuple[Car, ...] = (),
    obstacles: tuple[Obstacle, ...] = (),
    speed_boosts: tuple[SpeedBoost, ...] = (),
    status: str = IDLE,
) -> Race:
    parameters = load_parameters()
    return Race(
        parameters=parameters,
        player_car=player,
        ai_cars=ai_cars,
        obstacles=obstacles,
        speed_boosts=speed_boosts,
        background=initialize_background(parameters, np.random.default_rng(0)),
        status=status,
    )


def _player(**overrides) -> Car:
    attrs = {"car_id": 1, "x_position": 20.0, "y_position": 5.0, "controller": PLAYER}
    attrs.update(overrides)
    return Car(**attrs)


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------


def test_initialized_race_is_idle_at_the_grid() -> None:
    parameters = load_parameters()
    race = initialize_race(parameters, seed=1)
    assert race.status == IDLE
    assert race.player_car.controller == PLAYER
    assert (race.player_car.x_position, race.player_car.y_position) == (20.0, 5.0)
    assert race.player_car.distance_travelled == 0.0
    assert len(race.cars) == parameters.number_of_cars
    assert all(car.controller == AI for car in race.ai_cars)


def test_ai_cars_start_moving() -> None:
    race = initialize_race(load_parameters(), seed=5)
    assert all(car.speed != "rest" for car in race.ai_cars)
    assert all(car.image_tag for car in race.ai_cars)


def test_initialization_is_seeded() -> None:
    parameters = load_parameters()
    assert initialize_race(parameters, seed=11) == initialize_race(parameters, seed=11)


def test_live_positions_equal_distances_at_start() -> None:
    """With nothing travelled, items show at their track distance."""
    race = initialize_race(load_parameters(), seed=2)
    for item in (*race.obstacles, *race.speed_boosts):
        assert race.item_y_position(item) == item.distance


# ---------------------------------------------------------------------------
# Invariants and queries
# ---------------------------------------------------------------------------


def test_player_car_must_be_player_controlled() -> None:
    with pytest.raises(ValueError, match="player_car"):
        _make_race(_player(controller=AI))


def test_ai_cars_must_be_ai_controlled() -> None:
    with pytest.raises(ValueError, match="ai_cars"):
        _make_race(_player(), ai_cars=(_player(car_id=2),))


def test_car_ids_must_be_unique() -> None:
    with pytest.raises(ValueError, match="unique"):
        _make_race(_player(), ai_cars=(Car(car_id=1, x_position=115, y_position=5),))


def test_cars_grouped_by_lane() -> None:
    ai_1 = Car(car_id=2, x_position=20.0, y_position=120.0)
    ai_2 = Car(car_id=3, x_position=210.0, y_position=5.0)
    race = _make_race(_player(), ai_cars=(ai_1, ai_2))
    lanes = race.lanes_and_cars_map()
    assert [car.car_id for car in lanes[1]] == [1, 2]
    assert [car.car_id for car in lanes[3]] == [3]
    assert 2 not in lanes


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


def test_status_transitions() -> None:
    race = _make_race(_player())
    ongoing = race.start()
    assert ongoing.status == ONGOING
    assert ongoing.abort().status == ABORTED
    assert ongoing.complete().status == COMPLETED


def test_terminal_statuses_are_final() -> None:
    finished = _make_race(_player()).start().complete()
    assert finished.is_terminal
    with pytest.raises(ValueError):
        finished.start()
    with pytest.raises(ValueError):
        finished.abort()


def test_idle_race_cannot_complete() -> None:
    with pytest.raises(ValueError, match="Cannot complete"):
        _make_race(_player()).complete()


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def test_snapshot_reports_live_item_positions() -> None:
    race = _make_race(
        _player(distance_travelled=500.0),
        obstacles=(Obstacle(x_position=115.0, distance=900.0),),
        speed_boosts=(SpeedBoost(x_position=20.0, distance=540.0, boost_id=0),),
    )
    data = snapshot(race)
    assert data["status"] == IDLE
    assert data["distance_travelled"] == 500.0
    assert data["obstacles"] == [{"x_position": 115.0, "y_position": 400.0, "lane": 2}]
    assert data["speed_boosts"][0]["y_position"] == 40.0
    assert data["speed_boosts"][0]["fetched"] is False
    assert data["cars"][0]["controller"] == PLAYER
    assert data["cars"][0]["lane"] == 1
    assert data["background"]["y_position"] == race.background.y_position
