"""
Shot input validation, simulation modes and display conversions.

The physics in golf_flight assumes finite inputs inside the ranges of the
selected SimulationConfig; this module is where raw values are checked.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from math import ceil, isfinite
from typing import Mapping

from golf_flight import DEFAULT_CONFIG, InputRanges, SimulationConfig


METERS_PER_YARD = 0.9144
DISPLAY_MIN_YARDS = 150.0
DISPLAY_PAD_YARDS = 50.0
DISPLAY_TICK_YARDS = 50.0


@dataclass(frozen=True)
class SimulationMode:
    label: str
    description: str
    config: SimulationConfig


SIMULATION_MODES: dict[str, SimulationMode] = {
    "standard": SimulationMode(
        label="Standard driver ranges",
        description="Launch 8-25 deg, spin 1500-5000 rpm, wind -10 to +10 m/s.",
        config=DEFAULT_CONFIG,
    ),
    "narrow_launch": SimulationMode(
        label="Narrow launch window",
        description="Same physics, launch angle limited to 10-18 deg.",
        config=replace(DEFAULT_CONFIG, ranges=InputRanges(launch_angle_deg=(10.0, 18.0))),
    ),
}

# (field name, label, unit, must be > 0)
FIELDS = [
    ("head_speed", "Head speed", "m/s", True),
    ("smash_factor", "Smash factor", "", True),
    ("launch_angle_deg", "Launch angle", "deg", True),
    ("spin_rate_rpm", "Spin rate", "rpm", True),
    ("wind_speed", "Wind speed", "m/s", False),
]


class ShotInputError(ValueError):
    """A raw input is missing, not a number, or outside its allowed range."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name


@dataclass(frozen=True)
class ShotInputs:
    head_speed: float
    smash_factor: float
    launch_angle_deg: float
    spin_rate_rpm: float
    wind_speed: float


def _parse_number(name: str, label: str, raw: object) -> float:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ShotInputError(name, f"{label} is required.")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ShotInputError(name, f"{label} must be a number.") from exc
    if not isfinite(value):
        raise ShotInputError(name, f"{label} must be a finite number.")
    return value


def parse_shot_inputs(raw: Mapping[str, object], ranges: InputRanges = DEFAULT_CONFIG.ranges) -> ShotInputs:
    """
    Convert raw field values (strings or numbers) into ShotInputs.
    Raises ShotInputError on the first field that fails.
    """
    values: dict[str, float] = {}
    for name, label, unit, positive in FIELDS:
        value = _parse_number(name, label, raw.get(name))
        if positive and value <= 0.0:
            raise ShotInputError(name, f"{label} must be greater than 0.")
        lower, upper = getattr(ranges, name)
        if value < lower or value > upper:
            suffix = f" {unit}" if unit else ""
            raise ShotInputError(name, f"{label} must be between {lower:g} and {upper:g}{suffix}.")
        values[name] = value
    return ShotInputs(**values)


def validate_shot_inputs(raw: Mapping[str, object], ranges: InputRanges = DEFAULT_CONFIG.ranges) -> str | None:
    """Message for the first invalid field, or None when everything is usable."""
    try:
        parse_shot_inputs(raw, ranges)
    except ShotInputError as exc:
        return str(exc)
    return None


# -----------------------------
# Display conversions
# -----------------------------


def meters_to_yards(meters: float) -> float:
    return meters / METERS_PER_YARD


def yards_to_meters(yards: float) -> float:
    return yards * METERS_PER_YARD


def wind_display_value(physics_wind: float) -> float:
    """Display convention: positive means wind into the golfer's face."""
    return -physics_wind


def wind_from_display(display_wind: float) -> float:
    return -display_wind


def max_display_meters(*distances_m: float) -> float:
    """
    X-axis extent for charts: the longest distance plus a margin,
    rounded up to a whole tick, never below the minimum window.
    """
    longest_yards = max((meters_to_yards(d) for d in distances_m), default=0.0)
    padded = longest_yards + DISPLAY_PAD_YARDS
    yards = ceil(padded / DISPLAY_TICK_YARDS) * DISPLAY_TICK_YARDS
    return yards_to_meters(max(DISPLAY_MIN_YARDS, yards))
