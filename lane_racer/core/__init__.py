"""Core simulation modules for the Lane Racer engine."""

from lane_racer.core.background import Background, initialize_background
from lane_racer.core.car import AI, PLAYER, Car
from lane_racer.core.controls import (
    COMMANDS,
    SLOWDOWN,
    SPEEDUP,
    STEER_LEFT,
    STEER_RIGHT,
    candidate_car,
    candidate_race,
)
from lane_racer.core.crash_detection import (
    FRONT,
    LEFT,
    RIGHT,
    crash_detected,
    crash_detected_while_driving,
    spans_collide,
)
from lane_racer.core.lane import OUT_OF_TRACK, Lane, lane_of
from lane_racer.core.parameters import SPEED_TIERS, Parameters
from lane_racer.core.race import (
    ABORTED,
    COMPLETED,
    IDLE,
    ONGOING,
    Race,
    initialize_race,
    snapshot,
)
from lane_racer.core.speed_boost import enable_if_fetched, fetched_speed_boost
from lane_racer.core.track_items import (
    Obstacle,
    SpeedBoost,
    TrackItem,
    generate_obstacles,
    generate_speed_boosts,
)

__all__ = [
    "ABORTED",
    "AI",
    "Background",
    "COMMANDS",
    "COMPLETED",
    "Car",
    "FRONT",
    "IDLE",
    "LEFT",
    "Lane",
    "ONGOING",
    "OUT_OF_TRACK",
    "Obstacle",
    "PLAYER",
    "Parameters",
    "RIGHT",
    "Race",
    "SLOWDOWN",
    "SPEED_TIERS",
    "SPEEDUP",
    "STEER_LEFT",
    "STEER_RIGHT",
    "SpeedBoost",
    "TrackItem",
    "candidate_car",
    "candidate_race",
    "crash_detected",
    "crash_detected_while_driving",
    "enable_if_fetched",
    "fetched_speed_boost",
    "generate_obstacles",
    "generate_speed_boosts",
    "initialize_background",
    "initialize_race",
    "lane_of",
    "snapshot",
    "spans_collide",
]
