import pytest

from golf_flight import DEFAULT_CONFIG
from shot_inputs import (
    METERS_PER_YARD,
    SIMULATION_MODES,
    ShotInputError,
    ShotInputs,
    max_display_meters,
    meters_to_yards,
    parse_shot_inputs,
    validate_shot_inputs,
    wind_display_value,
    wind_from_display,
)


VALID = {
    "head_speed": "45",
    "smash_factor": "1.45",
    "launch_angle_deg": "14",
    "spin_rate_rpm": "2500",
    "wind_speed": "0",
}


def with_field(name, value):
    raw = dict(VALID)
    raw[name] = value
    return raw


class TestParseShotInputs:
    def test_valid_strings(self):
        inputs = parse_shot_inputs(VALID)
        assert inputs == ShotInputs(45.0, 1.45, 14.0, 2500.0, 0.0)

    def test_accepts_numbers(self):
        raw = {k: float(v) for k, v in VALID.items()}
        assert parse_shot_inputs(raw).spin_rate_rpm == 2500.0

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_field(self, blank):
        with pytest.raises(ShotInputError) as exc:
            parse_shot_inputs(with_field("head_speed", blank))
        assert exc.value.field_name == "head_speed"
        assert "required" in str(exc.value)

    def test_missing_field(self):
        raw = dict(VALID)
        del raw["wind_speed"]
        with pytest.raises(ShotInputError) as exc:
            parse_shot_inputs(raw)
        assert exc.value.field_name == "wind_speed"

    def test_not_a_number(self):
        with pytest.raises(ShotInputError, match="must be a number"):
            parse_shot_inputs(with_field("smash_factor", "abc"))

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite(self, value):
        with pytest.raises(ShotInputError, match="finite"):
            parse_shot_inputs(with_field("launch_angle_deg", value))

    def test_non_positive(self):
        with pytest.raises(ShotInputError, match="greater than 0"):
            parse_shot_inputs(with_field("spin_rate_rpm", "0"))

    @pytest.mark.parametrize(
        "name, value",
        [
            ("head_speed", "20"),
            ("head_speed", "60.5"),
            ("smash_factor", "1.2"),
            ("launch_angle_deg", "30"),
            ("spin_rate_rpm", "6000"),
            ("wind_speed", "12"),
            ("wind_speed", "-12"),
        ],
    )
    def test_out_of_range(self, name, value):
        with pytest.raises(ShotInputError, match="must be between") as exc:
            parse_shot_inputs(with_field(name, value))
        assert exc.value.field_name == name

    def test_headwind_is_allowed(self):
        assert parse_shot_inputs(with_field("wind_speed", "-10")).wind_speed == -10.0

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_shot_inputs(with_field("head_speed", "x"))


class TestModes:
    def test_standard_mode_uses_default_config(self):
        assert SIMULATION_MODES["standard"].config == DEFAULT_CONFIG

    def test_narrow_launch_window(self):
        narrow = SIMULATION_MODES["narrow_launch"].config.ranges
        raw = with_field("launch_angle_deg", "20")
        assert validate_shot_inputs(raw, DEFAULT_CONFIG.ranges) is None
        message = validate_shot_inputs(raw, narrow)
        assert message is not None
        assert "Launch angle" in message

    def test_modes_share_physics(self):
        narrow = SIMULATION_MODES["narrow_launch"].config
        assert narrow.ground == DEFAULT_CONFIG.ground
        assert narrow.dt == DEFAULT_CONFIG.dt


class TestDisplayHelpers:
    def test_yards(self):
        assert meters_to_yards(METERS_PER_YARD * 100.0) == pytest.approx(100.0)

    def test_wind_sign_round_trip(self):
        assert wind_display_value(3.0) == -3.0
        assert wind_display_value(-4.5) == 4.5
        assert wind_from_display(3.0) == -3.0
        assert wind_from_display(wind_display_value(7.5)) == 7.5

    def test_minimum_window(self):
        assert max_display_meters(0.0, 0.0) >= 150 * 0.9144
        assert max_display_meters() >= 150 * 0.9144

    def test_padded_and_rounded(self):
        display = max_display_meters(300 * 0.9144, 330 * 0.9144)
        yards = round(meters_to_yards(display), 6)
        assert yards % 50 == 0
        assert yards >= 380
