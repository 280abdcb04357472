import pytest

from golf_flight import SimulationResult, effective_spin_rate, simulate, spin_at_time


BASE = dict(head_speed=45.0, smash_factor=1.45, launch_angle_deg=14.0, spin_rate_rpm=2500.0)


def run(wind: float = 0.0, **overrides) -> SimulationResult:
    kwargs = {**BASE, **overrides}
    return simulate(wind_speed=wind, **kwargs)


class TestReferenceDrive:
    """45 m/s head speed, 1.45 smash, 14 deg, 2500 rpm, calm"""

    def test_ball_speed(self):
        assert run().ball_speed == pytest.approx(45.0 * 1.45)

    def test_carry_in_driver_range(self):
        result = run()
        assert 180.0 <= result.carry_meters <= 260.0

    def test_flight_ends_on_ground(self):
        result = run()
        assert result.trajectory[-1].y == pytest.approx(0.0, abs=1e-12)
        assert result.trajectory[-1].x == pytest.approx(result.carry_meters)

    def test_distances_are_ordered(self):
        result = run()
        assert result.total_meters >= result.carry_meters >= 0.0
        assert result.max_height_meters >= 0.0
        assert result.total_meters == pytest.approx(result.carry_meters + result.run_meters)

    def test_run_path_in_absolute_coordinates(self):
        result = run()
        assert result.run_trajectory[0].x == pytest.approx(result.carry_meters)
        assert result.run_trajectory[0].y == 0.0
        assert result.run_trajectory[-1].x == pytest.approx(result.total_meters)

    def test_landing_spin_is_decayed(self):
        result = run()
        spin0 = effective_spin_rate(2500.0)
        assert result.landing_spin_rpm == pytest.approx(spin_at_time(spin0, result.flight_time_sec))
        assert result.landing_spin_rpm < 2500.0


class TestDeterminism:
    def test_identical_inputs_identical_result(self):
        assert run(3.0) == run(3.0)


class TestWind:
    def test_tailwind_beats_headwind(self):
        assert run(8.0).carry_meters > run(-8.0).carry_meters

    def test_calm_between_headwind_and_tailwind(self):
        calm = run(0.0).carry_meters
        assert run(-8.0).carry_meters < calm < run(8.0).carry_meters

    @pytest.mark.parametrize("wind", [-10.0, -8.0, 0.0, 8.0, 10.0])
    def test_totals_never_below_carry(self, wind):
        result = run(wind)
        assert result.total_meters >= result.carry_meters >= 0.0


class TestInputGrid:
    @pytest.mark.parametrize(
        "head_speed, smash, angle, spin",
        [
            (25.0, 1.30, 8.0, 1500.0),
            (60.0, 1.56, 25.0, 5000.0),
            (35.0, 1.40, 18.0, 4000.0),
            (55.0, 1.50, 10.0, 2000.0),
        ],
    )
    def test_corners_are_well_formed(self, head_speed, smash, angle, spin):
        result = simulate(head_speed, smash, angle, spin, 0.0)
        assert result.total_meters >= result.carry_meters > 0.0
        assert result.max_height_meters > 0.0
        assert result.trajectory[-1].y == 0.0

    def test_faster_swing_carries_further(self):
        assert run(head_speed=50.0).carry_meters > run(head_speed=40.0).carry_meters
