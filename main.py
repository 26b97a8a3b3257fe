"""CLI entrypoint for the Lane Racer simulation core."""

from __future__ import annotations

import argparse
import logging
import sys

from lane_racer import __version__
from lane_racer.config import load_parameters
from lane_racer.core.controls import SPEEDUP, STEER_LEFT, STEER_RIGHT
from lane_racer.core.race import ONGOING, initialize_race
from lane_racer.engine import apply_command, tick

# Commands issued before the tick with the same number.
_SCRIPT: dict[int, str] = {
    1: SPEEDUP,
    3: STEER_RIGHT,
    5: SPEEDUP,
    12: STEER_RIGHT,
    20: STEER_LEFT,
    30: SPEEDUP,
}


def main(argv: list[str] | None = None) -> int:
    """Drive a seeded demo race headlessly and print its progress."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=7, help="race seed")
    parser.add_argument("--ticks", type=int, default=150, help="maximum ticks")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Lane Racer Simulation Core v{__version__}")
    print("=" * 56)

    # -- Load parameters and build the grid ----------------------------------
    parameters = load_parameters()
    race = initialize_race(parameters, seed=args.seed).start()
    print(f"\nRace distance : {parameters.race_distance:.0f}")
    print(f"Cars          : {parameters.number_of_cars}")
    print(f"Obstacles     : {len(race.obstacles)}")
    print(f"Speed boosts  : {len(race.speed_boosts)}")
    print("-" * 56)

    # -- Run the scripted race -----------------------------------------------
    print(f"\n  {'Tick':>4}  {'Lane':>4}  {'Speed':>8}  {'Boost':>5}  {'Distance':>9}")
    print(f"  {'----':>4}  {'----':>4}  {'-----':>8}  {'-----':>5}  {'--------':>9}")
    for tick_number in range(1, args.ticks + 1):
        command = _SCRIPT.get(tick_number)
        if command is not None:
            race = apply_command(race, command)
        race = tick(race)
        car = race.player_car
        print(
            f"  {tick_number:4d}  {car.lane(parameters):4d}  {car.speed:>8}"
            f"  {'yes' if car.speed_boost_active else 'no':>5}"
            f"  {car.distance_travelled:9.1f}"
        )
        if race.status != ONGOING:
            break

    print(f"\nRace {race.status}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
