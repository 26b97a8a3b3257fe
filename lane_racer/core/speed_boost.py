"""Speed boost activation for the player car.

Speed boosts are placed rarely on the track.  The player car fetches one
by driving over it in the same lane; the car then drives faster for
``speed_boost_duration_ticks`` ticks.  Every boost can be fetched once.
"""

from __future__ import annotations

from lane_racer.core.crash_detection import spans_collide
from lane_racer.core.race import Race
from lane_racer.core.track_items import SpeedBoost


def fetched_speed_boost(race: Race) -> SpeedBoost | None:
    """Return the unused same-lane boost under the player car, if any."""
    player_car = race.player_car
    parameters = race.parameters
    lane = player_car.lane(parameters)
    for boost in race.lanes_and_speed_boosts_map().get(lane, []):
        if boost.boost_id in race.fetched_speed_boosts:
            continue
        if spans_collide(
            race.item_y_position(boost),
            parameters.obstacle_and_speed_boost_length,
            player_car.y_position,
            parameters.car_length,
        ):
            return boost
    return None


def enable_if_fetched(race: Race) -> Race:
    """Activate a speed boost if the player car has reached one.

    The fetched boost is marked as used so that staying over it does not
    start a new boost window.  When no boost is reached the very same
    race is returned.
    """
    boost = fetched_speed_boost(race)
    if boost is None:
        return race
    player_car = race.player_car.enable_speed_boost(
        race.parameters.speed_boost_duration_ticks
    )
    return race.update_player_car(player_car).mark_speed_boost_fetched(boost)
