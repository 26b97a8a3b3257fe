"""Configuration loader for the Lane Racer simulation core."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from lane_racer.core.lane import Lane
from lane_racer.core.parameters import Parameters

logger = logging.getLogger(__name__)

DATA_DIR: Path = Path(__file__).resolve().parent / "data"
PARAMETERS_PATH: Path = DATA_DIR / "parameters.yaml"

_REQUIRED_SECTIONS: tuple[str, ...] = (
    "console_screen_height",
    "race_distance",
    "driving_area",
    "lanes",
    "background_image_container_height",
    "car",
    "car_initial_positions",
    "car_drive_steps",
    "car_steering_step",
    "track_items",
    "speed_boost",
    "engine",
    "images",
)


def _require(section: dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(section, dict) or key not in section:
        raise ValueError(f"{where} is missing required field '{key}'")
    return section[key]


def _numeric(value: Any, what: str) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} must be numeric, got {type(value).__name__}")
    return float(value)


def _number(section: dict[str, Any], key: str, where: str) -> float:
    return _numeric(_require(section, key, where), f"{where}: '{key}'")


def _integer(section: dict[str, Any], key: str, where: str) -> int:
    value = _number(section, key, where)
    if not value.is_integer():
        raise ValueError(f"{where}: '{key}' must be a whole number, got {value}")
    return int(value)


def _strings(section: dict[str, Any], key: str, where: str) -> tuple[str, ...]:
    value = _require(section, key, where)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{where}: '{key}' must be a list of strings")
    return tuple(value)


def _parse_lanes(entries: Any) -> tuple[Lane, ...]:
    if not isinstance(entries, list):
        raise ValueError("'lanes' must be a list")
    lanes: list[Lane] = []
    for idx, entry in enumerate(entries):
        where = f"Lane entry {idx}"
        lanes.append(
            Lane(
                lane_number=_integer(entry, "lane_number", where),
                x_start=_number(entry, "x_start", where),
                x_end=_number(entry, "x_end", where),
            )
        )
    return tuple(lanes)


def _parse_positions(entries: Any) -> tuple[tuple[float, float], ...]:
    if not isinstance(entries, list):
        raise ValueError("'car_initial_positions' must be a list")
    positions: list[tuple[float, float]] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, list) or len(entry) != 2:
            raise ValueError(f"Car initial position {idx} must be an [x, y] pair")
        x, y = entry
        where = f"Car initial position {idx}"
        positions.append((_numeric(x, f"{where} x"), _numeric(y, f"{where} y")))
    return tuple(positions)


def parse_parameters(data: dict[str, Any]) -> Parameters:
    """Build validated :class:`Parameters` from a parsed mapping.

    Args:
        data: Mapping with the layout of ``parameters.yaml``.

    Returns:
        The validated parameters.

    Raises:
        ValueError: If a section or field is missing, has the wrong type,
            or violates a parameter invariant.
    """
    if not isinstance(data, dict):
        raise ValueError("Parameters document must be a mapping")

    # --- Validate required sections ---
    for section in _REQUIRED_SECTIONS:
        if section not in data:
            raise ValueError(f"Parameters are missing required section '{section}'")

    area = data["driving_area"]
    car = data["car"]
    items = data["track_items"]
    boost = data["speed_boost"]
    engine = data["engine"]
    images = data["images"]

    steps = data["car_drive_steps"]
    if not isinstance(steps, dict):
        raise ValueError("'car_drive_steps' must be a mapping")
    drive_steps = {str(tier): _number(steps, tier, "car_drive_steps") for tier in steps}

    crash_is_fatal = _require(engine, "crash_is_fatal", "engine")
    if not isinstance(crash_is_fatal, bool):
        raise ValueError("engine: 'crash_is_fatal' must be a boolean")

    x_positions = _require(items, "x_positions", "track_items")
    if not isinstance(x_positions, list):
        raise ValueError("track_items: 'x_positions' must be a list")

    player_image = _require(images, "player_car", "images")
    if not isinstance(player_image, str):
        raise ValueError("images: 'player_car' must be a string")

    return Parameters(
        lanes=_parse_lanes(data["lanes"]),
        driving_area=(
            _number(area, "x_start", "driving_area"),
            _number(area, "x_end", "driving_area"),
        ),
        race_distance=_number(data, "race_distance", "Parameters"),
        console_screen_height=_number(data, "console_screen_height", "Parameters"),
        background_image_container_height=_number(
            data, "background_image_container_height", "Parameters"
        ),
        car_width=_number(car, "width", "car"),
        car_length=_number(car, "length", "car"),
        car_initial_positions=_parse_positions(data["car_initial_positions"]),
        car_drive_steps=drive_steps,
        car_steering_step=_number(data, "car_steering_step", "Parameters"),
        obstacle_and_speed_boost_length=_number(items, "length", "track_items"),
        item_x_positions=tuple(
            _numeric(x, f"track_items: x position {idx}")
            for idx, x in enumerate(x_positions)
        ),
        track_items_clearance=_number(items, "clearance", "track_items"),
        obstacle_spacing=_number(items, "obstacle_spacing", "track_items"),
        obstacle_probability=_number(items, "obstacle_probability", "track_items"),
        speed_boost_spacing=_number(items, "speed_boost_spacing", "track_items"),
        speed_boost_probability=_number(
            items, "speed_boost_probability", "track_items"
        ),
        speed_boost_multiplier=_number(boost, "multiplier", "speed_boost"),
        speed_boost_duration_ticks=_integer(boost, "duration_ticks", "speed_boost"),
        tick_interval=_number(engine, "tick_interval", "engine"),
        crash_is_fatal=crash_is_fatal,
        player_car_image=player_image,
        ai_car_images=_strings(images, "ai_cars", "images"),
        background_images=_strings(images, "backgrounds", "images"),
    )


def load_parameters(path: Path | None = None) -> Parameters:
    """Load the game parameters from a YAML file.

    Args:
        path: Optional override for the parameters file path.

    Returns:
        The validated :class:`Parameters`.

    Raises:
        FileNotFoundError: If the parameters file does not exist.
        ValueError: If the file content is malformed.
    """
    parameters_path = path or PARAMETERS_PATH
    if not parameters_path.exists():
        raise FileNotFoundError(f"Parameters file not found: {parameters_path}")

    with open(parameters_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    parameters = parse_parameters(data)
    logger.debug(
        "Loaded parameters from %s: %d lanes, %d cars",
        parameters_path,
        len(parameters.lanes),
        parameters.number_of_cars,
    )
    return parameters
