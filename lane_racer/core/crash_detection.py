"""Crash detection against other cars and obstacles.

The race and the querying car passed in already reflect the forward or
sideways movement being checked.  The caller applies the move to a
candidate state first and asks whether that candidate crashes.  A whole
tick step is checked with ``crash_detected_while_driving``, which also
covers the ground every item travelled during the step.

Lateral separation is discrete (lanes), so every check reduces to
longitudinal interval overlap within the querying car's lane.  Spans
that merely touch count as a crash.
"""

from __future__ import annotations

from lane_racer.core.car import Car
from lane_racer.core.lane import OUT_OF_TRACK
from lane_racer.core.race import Race
from lane_racer.core.track_items import Obstacle

FRONT: str = "front"
LEFT: str = "left"
RIGHT: str = "right"

CRASH_CHECK_SIDES: tuple[str, ...] = (FRONT, LEFT, RIGHT)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def crash_detected(race: Race, querying_car: Car, side: str) -> bool:
    """Decide whether a candidate move crashes.

    Args:
        race: Candidate race, already holding the moved car.
        querying_car: The moved car as it stands in *race*.
        side: ``FRONT`` for forward movement, ``LEFT`` or ``RIGHT`` for
            steering.

    Returns:
        ``True`` if the move must be rejected.

    Raises:
        ValueError: If *side* is not one of ``CRASH_CHECK_SIDES``.
    """
    if side not in CRASH_CHECK_SIDES:
        raise ValueError(f"side must be one of {CRASH_CHECK_SIDES}.")

    # Steering off the drivable area hits the scenery.
    if side != FRONT and querying_car.lane(race.parameters) == OUT_OF_TRACK:
        return True

    return _crash_with_car(race, querying_car, side) or _crash_with_obstacle(
        race, querying_car, side
    )


def spans_collide(
    y_1: float, length_1: float, y_2: float, length_2: float
) -> bool:
    """Three-way collision test of two longitudinal spans.

    Spans ``[y_1, y_1 + length_1]`` and ``[y_2, y_2 + length_2]`` collide
    when they start at the same position, when one's front edge exactly
    meets the other's rear edge, or when an edge of one falls strictly
    inside the other.
    """
    return (
        _at_same_position(y_1, y_2)
        or _just_touching(y_1, length_1, y_2, length_2)
        or _overlapping(y_1, length_1, y_2, length_2)
    )


# ---------------------------------------------------------------------------
# Span predicates
# ---------------------------------------------------------------------------


def _at_same_position(y_1: float, y_2: float) -> bool:
    return y_1 == y_2


def _just_touching(y_1: float, length_1: float, y_2: float, length_2: float) -> bool:
    return y_1 + length_1 == y_2 or y_2 + length_2 == y_1


def _overlapping(y_1: float, length_1: float, y_2: float, length_2: float) -> bool:
    # Front of span 1 inside span 2, or rear of span 1 inside span 2.
    return (y_1 < y_2 < y_1 + length_1) or (y_2 < y_1 < y_2 + length_2)


# ---------------------------------------------------------------------------
# Crash with another car
# ---------------------------------------------------------------------------


def _crash_with_car(race: Race, querying_car: Car, side: str) -> bool:
    car_length = race.parameters.car_length
    return any(
        spans_collide(car.y_position, car_length, querying_car.y_position, car_length)
        for car in _crashable_cars(race, querying_car, side)
    )


def _crashable_cars(race: Race, querying_car: Car, side: str) -> list[Car]:
    querying_y = querying_car.y_position
    cars = _same_lane_cars(race, querying_car)
    if side == FRONT:
        # Cars behind cannot be hit by moving forward.
        return [car for car in cars if car.y_position >= querying_y]
    # A sideways move can clip a car from one length behind to one ahead.
    car_length = race.parameters.car_length
    return [
        car
        for car in cars
        if querying_y - car_length <= car.y_position <= querying_y + car_length
    ]


def _same_lane_cars(race: Race, querying_car: Car) -> list[Car]:
    lane = querying_car.lane(race.parameters)
    return [
        car
        for car in race.lanes_and_cars_map().get(lane, [])
        if car.car_id != querying_car.car_id
    ]


# ---------------------------------------------------------------------------
# Crash with an obstacle
# ---------------------------------------------------------------------------


def _crash_with_obstacle(race: Race, querying_car: Car, side: str) -> bool:
    car_length = race.parameters.car_length
    obstacle_length = race.parameters.obstacle_and_speed_boost_length
    return any(
        spans_collide(
            querying_car.y_position,
            car_length,
            race.item_y_position(obstacle),
            obstacle_length,
        )
        for obstacle in _crashable_obstacles(race, querying_car, side)
    )


def _crashable_obstacles(race: Race, querying_car: Car, side: str) -> list[Obstacle]:
    lane = querying_car.lane(race.parameters)
    obstacles = race.lanes_and_obstacles_map().get(lane, [])
    if side != FRONT:
        return obstacles
    # Obstacles already passed are out of reach when moving forward.
    return [
        obstacle
        for obstacle in obstacles
        if race.item_y_position(obstacle) >= querying_car.y_position
    ]


# ---------------------------------------------------------------------------
# Crash while driving a whole tick step
# ---------------------------------------------------------------------------


def crash_detected_while_driving(
    race: Race, candidate: Race, querying_car: Car
) -> bool:
    """Front check for a tick that moved everything by a whole step.

    Besides the static check on *candidate*, every same-lane car and
    obstacle that was ahead of the querying car in *race* is tested with
    the span it swept during the step, so nothing can be driven through
    between two ticks.

    Args:
        race: Committed race before the step.
        candidate: Race after the step, holding *querying_car*.
        querying_car: The moved car as it stands in *candidate*.
    """
    if crash_detected(candidate, querying_car, FRONT):
        return True

    parameters = race.parameters
    querying_y = querying_car.y_position
    lane = querying_car.lane(parameters)

    before = {car.car_id: car for car in race.cars}
    for car in candidate.lanes_and_cars_map().get(lane, []):
        previous = before.get(car.car_id)
        if car.car_id == querying_car.car_id or previous is None:
            continue
        if previous.y_position >= querying_y and _swept_collide(
            querying_y,
            parameters.car_length,
            previous.y_position,
            car.y_position,
            parameters.car_length,
        ):
            return True

    for obstacle in candidate.lanes_and_obstacles_map().get(lane, []):
        previous_y = race.item_y_position(obstacle)
        if previous_y >= querying_y and _swept_collide(
            querying_y,
            parameters.car_length,
            previous_y,
            candidate.item_y_position(obstacle),
            parameters.obstacle_and_speed_boost_length,
        ):
            return True
    return False


def _swept_collide(
    y: float, length: float, y_from: float, y_to: float, other_length: float
) -> bool:
    # The other span covers everything between its two positions.
    start = min(y_from, y_to)
    return spans_collide(y, length, start, abs(y_to - y_from) + other_length)
