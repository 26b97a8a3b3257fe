"""Player commands and their candidate race states."""

from __future__ import annotations

from lane_racer.core.car import Car
from lane_racer.core.crash_detection import FRONT, LEFT, RIGHT
from lane_racer.core.race import Race

SPEEDUP: str = "speedup"
SLOWDOWN: str = "slowdown"
STEER_LEFT: str = "steer_left"
STEER_RIGHT: str = "steer_right"

COMMANDS: tuple[str, ...] = (SPEEDUP, SLOWDOWN, STEER_LEFT, STEER_RIGHT)


def candidate_car(race: Race, command: str) -> tuple[Car, str]:
    """Apply a command speculatively to the player car.

    Args:
        race: Committed race.
        command: One of ``COMMANDS``.

    Returns:
        The moved player car and the side its move must be checked on.

    Raises:
        ValueError: If *command* is unknown.
    """
    car = race.player_car
    step = race.parameters.car_steering_step
    if command == SPEEDUP:
        return car.accelerate(), FRONT
    if command == SLOWDOWN:
        return car.decelerate(), FRONT
    if command == STEER_LEFT:
        return car.steer(-step), LEFT
    if command == STEER_RIGHT:
        return car.steer(step), RIGHT
    raise ValueError(f"Unknown command '{command}'; expected one of {COMMANDS}.")


def candidate_race(race: Race, command: str) -> tuple[Race, Car, str]:
    """Candidate race holding the moved player car, plus the car and side."""
    car, side = candidate_car(race, command)
    return race.update_player_car(car), car, side
