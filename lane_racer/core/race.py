"""Race world state for the Lane Racer simulation core.

A ``Race`` is an immutable value.  Every change (a tick, an accepted
command, a status transition) produces a new ``Race``, which keeps
speculative candidate states free of side effects.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np
from numpy.random import Generator

from lane_racer.core.background import Background, initialize_background
from lane_racer.core.car import AI, PLAYER, Car
from lane_racer.core.parameters import SPEED_TIERS, Parameters
from lane_racer.core.track_items import (
    Obstacle,
    SpeedBoost,
    TrackItem,
    generate_obstacles,
    generate_speed_boosts,
)

# ---------------------------------------------------------------------------
# Race status
# ---------------------------------------------------------------------------

IDLE: str = "idle"
ONGOING: str = "ongoing"
ABORTED: str = "aborted"
COMPLETED: str = "completed"

RACE_STATUSES: tuple[str, ...] = (IDLE, ONGOING, ABORTED, COMPLETED)
TERMINAL_STATUSES: tuple[str, ...] = (ABORTED, COMPLETED)

# AI cars never start at rest.
_AI_SPEED_TIERS: tuple[str, ...] = SPEED_TIERS[1:]


# ---------------------------------------------------------------------------
# World state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Race:
    """Complete world state of a single race.

    Attributes:
        parameters: Game parameters the race was built with.
        player_car: The only car with ``controller == PLAYER``.
        ai_cars: All other cars.
        obstacles: Static hazards along the track.
        speed_boosts: Static speed boosts along the track.
        background: Scenery and its scroll offset.
        status: One of ``RACE_STATUSES``.
        fetched_speed_boosts: ``boost_id`` of every boost already used.
    """

    parameters: Parameters
    player_car: Car
    ai_cars: tuple[Car, ...]
    obstacles: tuple[Obstacle, ...]
    speed_boosts: tuple[SpeedBoost, ...]
    background: Background
    status: str = IDLE
    fetched_speed_boosts: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate race state."""
        if self.status not in RACE_STATUSES:
            raise ValueError(f"status must be one of {RACE_STATUSES}.")
        if not self.player_car.is_player:
            raise ValueError("player_car must be controlled by the player.")
        if any(car.is_player for car in self.ai_cars):
            raise ValueError("ai_cars must all be AI controlled.")
        ids = [car.car_id for car in self.cars]
        if len(set(ids)) != len(ids):
            raise ValueError("car ids must be unique.")

    # -- Queries --------------------------------------------------------------

    @property
    def cars(self) -> tuple[Car, ...]:
        """Player car followed by the AI cars."""
        return (self.player_car, *self.ai_cars)

    @property
    def distance_travelled(self) -> float:
        return self.player_car.distance_travelled

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def item_y_position(self, item: TrackItem) -> float:
        """Live on-screen position of an obstacle or speed boost."""
        return item.y_position(self.player_car.distance_travelled)

    def lanes_and_cars_map(self) -> dict[int, list[Car]]:
        """Group all cars by the lane they are in."""
        lanes: dict[int, list[Car]] = defaultdict(list)
        for car in self.cars:
            lanes[car.lane(self.parameters)].append(car)
        return dict(lanes)

    def lanes_and_obstacles_map(self) -> dict[int, list[Obstacle]]:
        """Group all obstacles by the lane they are in."""
        lanes: dict[int, list[Obstacle]] = defaultdict(list)
        for obstacle in self.obstacles:
            lanes[obstacle.lane(self.parameters)].append(obstacle)
        return dict(lanes)

    def lanes_and_speed_boosts_map(self) -> dict[int, list[SpeedBoost]]:
        """Group all speed boosts by the lane they are in."""
        lanes: dict[int, list[SpeedBoost]] = defaultdict(list)
        for boost in self.speed_boosts:
            lanes[boost.lane(self.parameters)].append(boost)
        return dict(lanes)

    # -- Updates --------------------------------------------------------------

    def update_player_car(self, car: Car) -> Race:
        return replace(self, player_car=car)

    def update_ai_cars(self, cars: tuple[Car, ...]) -> Race:
        return replace(self, ai_cars=tuple(cars))

    def mark_speed_boost_fetched(self, boost: SpeedBoost) -> Race:
        return replace(
            self, fetched_speed_boosts=self.fetched_speed_boosts | {boost.boost_id}
        )

    def scroll_background(self) -> Race:
        background = self.background.offset(self.distance_travelled, self.parameters)
        return replace(self, background=background)

    # -- Status transitions ---------------------------------------------------

    def start(self) -> Race:
        """Move an idle race to ``ONGOING``."""
        if self.status != IDLE:
            raise ValueError(f"Cannot start a race that is {self.status}.")
        return replace(self, status=ONGOING)

    def abort(self) -> Race:
        if self.status != ONGOING:
            raise ValueError(f"Cannot abort a race that is {self.status}.")
        return replace(self, status=ABORTED)

    def complete(self) -> Race:
        if self.status != ONGOING:
            raise ValueError(f"Cannot complete a race that is {self.status}.")
        return replace(self, status=COMPLETED)


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------


def initialize_race(parameters: Parameters, seed: int | None = None) -> Race:
    """Build an idle race at the starting grid.

    The player car takes the first initial position.  Every other
    position gets an AI car with a random non-rest speed tier and image.
    Obstacles, speed boosts and scenery are placed for the whole track.

    Args:
        parameters: Game parameters.
        seed: Random seed for reproducibility.  ``None`` uses entropy
            from the OS.

    Returns:
        A ``Race`` with status ``IDLE``.
    """
    rng: Generator = np.random.default_rng(seed)

    (player_x, player_y), *ai_positions = parameters.car_initial_positions
    player_car = Car(
        car_id=1,
        x_position=player_x,
        y_position=player_y,
        controller=PLAYER,
        image_tag=parameters.player_car_image,
    )

    ai_cars: list[Car] = []
    for car_id, (x, y) in enumerate(ai_positions, start=2):
        speed = _AI_SPEED_TIERS[int(rng.integers(len(_AI_SPEED_TIERS)))]
        image = parameters.ai_car_images[
            int(rng.integers(len(parameters.ai_car_images)))
        ]
        ai_cars.append(
            Car(
                car_id=car_id,
                x_position=x,
                y_position=y,
                speed=speed,
                controller=AI,
                image_tag=image,
            )
        )

    obstacles = generate_obstacles(parameters, rng)
    speed_boosts = generate_speed_boosts(parameters, rng, obstacles)

    return Race(
        parameters=parameters,
        player_car=player_car,
        ai_cars=tuple(ai_cars),
        obstacles=tuple(obstacles),
        speed_boosts=tuple(speed_boosts),
        background=initialize_background(parameters, rng),
    )


# ---------------------------------------------------------------------------
# Display snapshot
# ---------------------------------------------------------------------------


def _car_entry(car: Car, parameters: Parameters) -> dict[str, Any]:
    return {
        "id": car.car_id,
        "controller": car.controller,
        "x_position": car.x_position,
        "y_position": car.y_position,
        "lane": car.lane(parameters),
        "speed": car.speed,
        "image": car.image_tag,
        "speed_boost_active": car.speed_boost_active,
    }


def snapshot(race: Race) -> dict[str, Any]:
    """Render a race into plain data for the display layer.

    Track items are reported with their live y-positions.
    """
    parameters = race.parameters
    return {
        "status": race.status,
        "distance_travelled": race.distance_travelled,
        "race_distance": parameters.race_distance,
        "cars": [_car_entry(car, parameters) for car in race.cars],
        "obstacles": [
            {
                "x_position": obstacle.x_position,
                "y_position": race.item_y_position(obstacle),
                "lane": obstacle.lane(parameters),
            }
            for obstacle in race.obstacles
        ],
        "speed_boosts": [
            {
                "id": boost.boost_id,
                "x_position": boost.x_position,
                "y_position": race.item_y_position(boost),
                "lane": boost.lane(parameters),
                "fetched": boost.boost_id in race.fetched_speed_boosts,
            }
            for boost in race.speed_boosts
        ],
        "background": {
            "left_side_images": list(race.background.left_side_images),
            "right_side_images": list(race.background.right_side_images),
            "y_position": race.background.y_position,
        },
    }
