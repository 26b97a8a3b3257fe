"""Car model for the Lane Racer simulation core."""

from __future__ import annotations

from dataclasses import dataclass, replace

from lane_racer.core.lane import lane_of
from lane_racer.core.parameters import SPEED_TIERS, Parameters

PLAYER: str = "player"
AI: str = "ai"

_CONTROLLERS: tuple[str, ...] = (PLAYER, AI)


@dataclass(frozen=True)
class Car:
    """Immutable snapshot of a single vehicle.

    The lane is never stored; it is derived from ``x_position`` whenever
    it is needed.

    Attributes:
        car_id: Unique identifier within a race.
        x_position: Lateral position of the car's left edge.
        y_position: On-screen position of the car's rear edge.
        speed: Speed tier, one of ``SPEED_TIERS``.
        controller: ``PLAYER`` or ``AI``.
        distance_travelled: Cumulative longitudinal progress.  Only the
            player car's value drives scrolling and completion.
        image_tag: Image shown by the display layer.
        speed_boost_active: Whether a speed boost is currently applied.
        speed_boost_ticks_remaining: Ticks left on the active boost.
    """

    car_id: int
    x_position: float
    y_position: float
    speed: str = "rest"
    controller: str = AI
    distance_travelled: float = 0.0
    image_tag: str = ""
    speed_boost_active: bool = False
    speed_boost_ticks_remaining: int = 0

    def __post_init__(self) -> None:
        """Validate car state."""
        if self.speed not in SPEED_TIERS:
            raise ValueError(f"speed must be one of {SPEED_TIERS}.")
        if self.controller not in _CONTROLLERS:
            raise ValueError(f"controller must be one of {_CONTROLLERS}.")
        if self.distance_travelled < 0.0:
            raise ValueError("distance_travelled must be >= 0.")
        if self.speed_boost_ticks_remaining < 0:
            raise ValueError("speed_boost_ticks_remaining must be >= 0.")
        if self.speed_boost_active != (self.speed_boost_ticks_remaining > 0):
            raise ValueError(
                "speed_boost_active must match speed_boost_ticks_remaining."
            )

    @property
    def is_player(self) -> bool:
        return self.controller == PLAYER

    def lane(self, parameters: Parameters) -> int:
        """Return the lane the car is in, or ``OUT_OF_TRACK``."""
        return lane_of(self.x_position, parameters.lanes)

    def drive_step(self, parameters: Parameters) -> float:
        """Longitudinal step per tick, including an active speed boost."""
        step: float = parameters.drive_step(self.speed)
        if self.speed_boost_active:
            step *= parameters.speed_boost_multiplier
        return step

    def accelerate(self) -> Car:
        """Return the car one speed tier faster, capped at the top tier."""
        index = min(SPEED_TIERS.index(self.speed) + 1, len(SPEED_TIERS) - 1)
        return replace(self, speed=SPEED_TIERS[index])

    def decelerate(self) -> Car:
        """Return the car one speed tier slower, floored at rest."""
        index = max(SPEED_TIERS.index(self.speed) - 1, 0)
        return replace(self, speed=SPEED_TIERS[index])

    def steer(self, dx: float) -> Car:
        """Return the car shifted laterally by *dx*."""
        return replace(self, x_position=self.x_position + dx)

    def move_y(self, dy: float) -> Car:
        """Return the car shifted along the screen's Y axis by *dy*."""
        return replace(self, y_position=self.y_position + dy)

    def travel(self, distance: float) -> Car:
        """Return the car with *distance* added to its progress."""
        return replace(self, distance_travelled=self.distance_travelled + distance)

    def enable_speed_boost(self, duration_ticks: int) -> Car:
        """Return the car with a fresh boost window of *duration_ticks*."""
        if duration_ticks < 1:
            raise ValueError("duration_ticks must be >= 1.")
        return replace(
            self,
            speed_boost_active=True,
            speed_boost_ticks_remaining=duration_ticks,
        )

    def consume_speed_boost_tick(self) -> Car:
        """Return the car with one boost tick used up.

        The boost switches off once no ticks remain.  A car without an
        active boost is returned unchanged.
        """
        if not self.speed_boost_active:
            return self
        remaining = self.speed_boost_ticks_remaining - 1
        return replace(
            self,
            speed_boost_active=remaining > 0,
            speed_boost_ticks_remaining=remaining,
        )
