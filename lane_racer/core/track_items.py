"""Obstacles and speed boosts placed along the track.

Track items never move.  Their on-screen position is always derived from
the player's progress::

    y_position = item.distance - player.distance_travelled

Placement is seeded via a per-call ``numpy.random.Generator`` so that a
race is fully reproducible from its seed.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.random import Generator

from lane_racer.core.lane import lane_of
from lane_racer.core.parameters import Parameters


@dataclass(frozen=True)
class TrackItem:
    """An item fixed at a point of the track.

    Attributes:
        x_position: Lateral position on the track.
        distance: Distance from the race start at which the item sits.
    """

    x_position: float
    distance: float

    def lane(self, parameters: Parameters) -> int:
        return lane_of(self.x_position, parameters.lanes)

    def y_position(self, player_distance_travelled: float) -> float:
        """Live on-screen position relative to the player's progress."""
        return self.distance - player_distance_travelled


@dataclass(frozen=True)
class Obstacle(TrackItem):
    """A static hazard. Touching one ends the move that reached it."""


@dataclass(frozen=True)
class SpeedBoost(TrackItem):
    """A bonus that speeds the player car up for a few ticks.

    Attributes:
        boost_id: Identifier used to remember that a boost was fetched.
    """

    boost_id: int = 0


def _slot_distances(parameters: Parameters, spacing: float) -> list[float]:
    """Longitudinal slots from the clearance zone up to the finish line."""
    distances: list[float] = []
    distance = parameters.track_items_clearance + spacing
    while distance + parameters.obstacle_and_speed_boost_length <= (
        parameters.race_distance
    ):
        distances.append(distance)
        distance += spacing
    return distances


def _pick_x(parameters: Parameters, rng: Generator) -> float:
    index = int(rng.integers(len(parameters.item_x_positions)))
    return parameters.item_x_positions[index]


def generate_obstacles(parameters: Parameters, rng: Generator) -> list[Obstacle]:
    """Place obstacles for the whole track.

    Each slot, spaced ``obstacle_spacing`` apart, holds an obstacle with
    probability ``obstacle_probability`` in a randomly chosen lane.
    """
    obstacles: list[Obstacle] = []
    for distance in _slot_distances(parameters, parameters.obstacle_spacing):
        if rng.random() < parameters.obstacle_probability:
            obstacles.append(
                Obstacle(x_position=_pick_x(parameters, rng), distance=distance)
            )
    return obstacles


def generate_speed_boosts(
    parameters: Parameters,
    rng: Generator,
    obstacles: list[Obstacle] | None = None,
) -> list[SpeedBoost]:
    """Place speed boosts for the whole track.

    A boost never shares a lane with an obstacle whose span it would
    touch or overlap; such slots are left empty.

    Args:
        parameters: Game parameters.
        rng: Seeded random generator.
        obstacles: Already placed obstacles to keep clear of.

    Returns:
        Speed boosts with sequential ``boost_id`` values starting at 0.
    """
    length = parameters.obstacle_and_speed_boost_length
    blocked: list[Obstacle] = obstacles if obstacles is not None else []
    boosts: list[SpeedBoost] = []
    for distance in _slot_distances(parameters, parameters.speed_boost_spacing):
        if rng.random() >= parameters.speed_boost_probability:
            continue
        x = _pick_x(parameters, rng)
        lane = lane_of(x, parameters.lanes)
        if any(
            obstacle.lane(parameters) == lane
            and abs(obstacle.distance - distance) <= length
            for obstacle in blocked
        ):
            continue
        boosts.append(
            SpeedBoost(x_position=x, distance=distance, boost_id=len(boosts))
        )
    return boosts
