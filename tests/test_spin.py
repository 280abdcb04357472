import pytest

from golf_flight import SPIN_DECAY_RATE, effective_spin_rate, spin_at_time


class TestSpinDecay:
    def test_unchanged_at_launch(self):
        assert spin_at_time(2500.0, 0.0) == 2500.0

    def test_monotonically_decreasing(self):
        times = [0.0, 0.5, 1.0, 2.5, 4.0, 7.0, 12.0]
        spins = [spin_at_time(2500.0, t) for t in times]
        assert all(a >= b for a, b in zip(spins, spins[1:]))
        assert all(s >= 0.0 for s in spins)

    def test_about_four_percent_per_second(self):
        assert SPIN_DECAY_RATE == pytest.approx(0.04)
        assert spin_at_time(1000.0, 1.0) == pytest.approx(1000.0 * 0.9607894, rel=1e-6)

    def test_custom_rate(self):
        assert spin_at_time(3000.0, 2.0, decay_rate=0.0) == 3000.0


class TestEffectiveSpin:
    @pytest.mark.parametrize("spin", [1500.0, 2500.0, 3000.0])
    def test_passthrough_up_to_knee(self, spin):
        assert effective_spin_rate(spin) == spin

    def test_compresses_high_spin(self):
        assert effective_spin_rate(4000.0) == pytest.approx(3400.0)
        assert effective_spin_rate(5000.0) == pytest.approx(3800.0)

    def test_capped_beyond_input_range(self):
        assert effective_spin_rate(6500.0) == pytest.approx(3800.0)
