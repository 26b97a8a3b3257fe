"""Static game parameters for the Lane Racer simulation core.

All geometry is expressed in screen pixels.  The origin is the bottom
left corner of the first lane: X grows to the right, Y grows up the
screen in the direction of travel.
"""

from __future__ import annotations

from dataclasses import dataclass

from lane_racer.core.lane import Lane

# Ordered slowest to fastest.
SPEED_TIERS: tuple[str, ...] = ("rest", "low", "moderate", "high")


@dataclass(frozen=True)
class Parameters:
    """Immutable configuration shared by every part of a race.

    Attributes:
        lanes: Lanes ordered left to right with non-overlapping bounds.
        driving_area: ``(x_start, x_end)`` of the complete driving area.
        race_distance: Distance the player must travel to finish.
        console_screen_height: Visible height of the race screen.
        background_image_container_height: Height of one scenery tile.
        car_width: Lateral size of every car.
        car_length: Longitudinal size of every car.
        car_initial_positions: Starting ``(x, y)`` of each car.  The first
            entry belongs to the player car.
        car_drive_steps: Longitudinal step per tick for each speed tier.
        car_steering_step: Lateral step of a single steering command.
        obstacle_and_speed_boost_length: Longitudinal size of track items.
        item_x_positions: Lateral positions track items may be placed at.
        track_items_clearance: Distance kept free of items at the start.
        obstacle_spacing: Longitudinal gap between obstacle slots.
        obstacle_probability: Chance that an obstacle slot is filled.
        speed_boost_spacing: Longitudinal gap between speed boost slots.
        speed_boost_probability: Chance that a speed boost slot is filled.
        speed_boost_multiplier: Drive step multiplier while boosted.
        speed_boost_duration_ticks: Number of ticks a boost lasts.
        tick_interval: Seconds between engine ticks.
        crash_is_fatal: Whether a player crash on a tick aborts the race.
        player_car_image: Image tag of the player car.
        ai_car_images: Image tags AI cars are drawn from.
        background_images: Scenery image tags.
    """

    lanes: tuple[Lane, ...]
    driving_area: tuple[float, float]
    race_distance: float
    console_screen_height: float
    background_image_container_height: float
    car_width: float
    car_length: float
    car_initial_positions: tuple[tuple[float, float], ...]
    car_drive_steps: dict[str, float]
    car_steering_step: float
    obstacle_and_speed_boost_length: float
    item_x_positions: tuple[float, ...]
    track_items_clearance: float
    obstacle_spacing: float
    obstacle_probability: float
    speed_boost_spacing: float
    speed_boost_probability: float
    speed_boost_multiplier: float
    speed_boost_duration_ticks: int
    tick_interval: float
    crash_is_fatal: bool
    player_car_image: str
    ai_car_images: tuple[str, ...]
    background_images: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate parameter invariants."""
        self._validate_lanes()

        if self.race_distance <= 0.0:
            raise ValueError("race_distance must be > 0.")
        if self.console_screen_height <= 0.0:
            raise ValueError("console_screen_height must be > 0.")
        if self.background_image_container_height <= 0.0:
            raise ValueError("background_image_container_height must be > 0.")
        if self.car_width <= 0.0 or self.car_length <= 0.0:
            raise ValueError("car dimensions must be > 0.")
        if not self.car_initial_positions:
            raise ValueError("car_initial_positions must not be empty.")
        if len(set(self.car_initial_positions)) != len(self.car_initial_positions):
            raise ValueError("car_initial_positions must not contain duplicates.")

        # --- Speed table: every tier, non-decreasing, rest does not move ---
        if set(self.car_drive_steps) != set(SPEED_TIERS):
            raise ValueError(f"car_drive_steps must define exactly {SPEED_TIERS}.")
        steps = [self.car_drive_steps[tier] for tier in SPEED_TIERS]
        if steps[0] != 0.0:
            raise ValueError("car_drive_steps['rest'] must be 0.")
        if steps != sorted(steps):
            raise ValueError("car_drive_steps must be non-decreasing by tier.")

        if self.car_steering_step <= 0.0:
            raise ValueError("car_steering_step must be > 0.")
        if self.obstacle_and_speed_boost_length <= 0.0:
            raise ValueError("obstacle_and_speed_boost_length must be > 0.")
        if not self.item_x_positions:
            raise ValueError("item_x_positions must not be empty.")
        for x in self.item_x_positions:
            if not any(lane.contains(x) for lane in self.lanes):
                raise ValueError(f"item x position {x} is outside every lane.")
        if self.track_items_clearance < 0.0:
            raise ValueError("track_items_clearance must be >= 0.")
        if self.obstacle_spacing <= 0.0 or self.speed_boost_spacing <= 0.0:
            raise ValueError("item spacing must be > 0.")
        if not 0.0 <= self.obstacle_probability <= 1.0:
            raise ValueError("obstacle_probability must be between 0.0 and 1.0.")
        if not 0.0 <= self.speed_boost_probability <= 1.0:
            raise ValueError("speed_boost_probability must be between 0.0 and 1.0.")
        if self.speed_boost_multiplier < 1.0:
            raise ValueError("speed_boost_multiplier must be >= 1.0.")
        if self.speed_boost_duration_ticks < 1:
            raise ValueError("speed_boost_duration_ticks must be >= 1.")
        if self.tick_interval <= 0.0:
            raise ValueError("tick_interval must be > 0.")
        if not self.player_car_image:
            raise ValueError("player_car_image must not be empty.")
        if not self.ai_car_images:
            raise ValueError("ai_car_images must not be empty.")
        if not self.background_images:
            raise ValueError("background_images must not be empty.")

    def _validate_lanes(self) -> None:
        if not self.lanes:
            raise ValueError("At least one lane must be configured.")
        numbers = [lane.lane_number for lane in self.lanes]
        if numbers != list(range(1, len(self.lanes) + 1)):
            raise ValueError("Lanes must be numbered 1..n from left to right.")
        for left, right in zip(self.lanes, self.lanes[1:]):
            if left.x_end > right.x_start:
                raise ValueError(
                    f"Lanes {left.lane_number} and {right.lane_number} overlap."
                )
        area_start, area_end = self.driving_area
        if self.lanes[0].x_start < area_start or self.lanes[-1].x_end > area_end:
            raise ValueError("Lanes must lie inside the driving area.")

    @property
    def number_of_cars(self) -> int:
        """Total number of cars in a race, player included."""
        return len(self.car_initial_positions)

    def drive_step(self, speed: str) -> float:
        """Return the longitudinal step per tick for a speed tier."""
        try:
            return self.car_drive_steps[speed]
        except KeyError:
            raise ValueError(f"Unknown speed tier '{speed}'.") from None
