"""Lane geometry for the Lane Racer simulation core."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

OUT_OF_TRACK: int = 0  # lane id for positions outside every lane


@dataclass(frozen=True)
class Lane:
    """A lateral corridor of the track.

    Attributes:
        lane_number: Lane identifier, starting at 1 from the left.
        x_start: Inclusive left bound along the X axis.
        x_end: Exclusive right bound along the X axis.
    """

    lane_number: int
    x_start: float
    x_end: float

    def __post_init__(self) -> None:
        """Validate lane bounds."""
        if self.lane_number < 1:
            raise ValueError("lane_number must be >= 1.")
        if self.x_end <= self.x_start:
            raise ValueError(
                f"Lane {self.lane_number}: x_end must be greater than x_start."
            )

    def contains(self, x_position: float) -> bool:
        """Return whether *x_position* lies in ``[x_start, x_end)``."""
        return self.x_start <= x_position < self.x_end


def lane_of(x_position: float, lanes: Sequence[Lane]) -> int:
    """Resolve the lane that contains a lateral position.

    Args:
        x_position: Position along the X axis.
        lanes: Configured lanes, ordered left to right.

    Returns:
        The ``lane_number`` of the first lane containing *x_position*, or
        ``OUT_OF_TRACK`` if none does.
    """
    for lane in lanes:
        if lane.contains(x_position):
            return lane.lane_number
    return OUT_OF_TRACK
