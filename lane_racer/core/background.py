"""Scrolling scenery beside the track."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from numpy.random import Generator

from lane_racer.core.parameters import Parameters


@dataclass(frozen=True)
class Background:
    """Scenery columns on both sides of the track.

    ``y_position`` is the offset of the scenery columns from the top of
    the screen.  It starts negative, with only the bottom tiles visible,
    and grows with the player's progress until the last tile is reached.

    Attributes:
        left_side_images: Scenery tiles on the left, top to bottom.
        right_side_images: Scenery tiles on the right, top to bottom.
        y_position: Current scroll offset.
    """

    left_side_images: tuple[str, ...]
    right_side_images: tuple[str, ...]
    y_position: float

    def offset(self, distance_travelled: float, parameters: Parameters) -> Background:
        """Return the background scrolled for *distance_travelled*."""
        y = initial_y_position(len(self.left_side_images), parameters)
        return replace(self, y_position=min(y + distance_travelled, 0.0))


def image_count(parameters: Parameters) -> int:
    """Number of scenery tiles needed to cover the race and one screen."""
    covered = parameters.race_distance + parameters.console_screen_height
    return math.ceil(covered / parameters.background_image_container_height)


def initial_y_position(count: int, parameters: Parameters) -> float:
    height = count * parameters.background_image_container_height
    return -(height - parameters.console_screen_height)


def initialize_background(parameters: Parameters, rng: Generator) -> Background:
    """Draw random scenery for both sides of the track."""
    count = image_count(parameters)
    pool = parameters.background_images

    def draw() -> tuple[str, ...]:
        return tuple(pool[int(i)] for i in rng.integers(len(pool), size=count))

    return Background(
        left_side_images=draw(),
        right_side_images=draw(),
        y_position=initial_y_position(count, parameters),
    )
