import numpy as np
import pytest

from pursuit.config_set import find_difficulty
from pursuit.economy import (
    proximity_pressure,
    update_heat,
    update_combo,
    score_rate,
    accrue_score,
    update_economy,
)
from pursuit.run_state import RunState


def _state(heat=0.0, combo=1.0, score=0.0):
    state = RunState(lives=3)
    state.heat = heat
    state.combo = combo
    state.score = score
    return state


def test_only_close_agents_add_pressure():
    assert proximity_pressure([100.0, 400.0]) == pytest.approx(200.0 * 0.0055)
    assert proximity_pressure([300.0, 1000.0]) == 0.0
    assert proximity_pressure([]) == 0.0


def test_heat_is_clamped_to_range(difficulty):
    hot = _state(heat=99.0)
    update_heat(hot, 100.0, difficulty, 1.0)
    assert hot.heat == 100.0

    cold = _state(heat=0.1)
    update_heat(cold, 0.0, difficulty, 1.0)
    assert cold.heat == 0.0


def test_heat_rate_scales_with_difficulty():
    rookie = _state()
    legend = _state()

    update_heat(rookie, 1.0, find_difficulty("rookie"), 1.0)
    update_heat(legend, 1.0, find_difficulty("legend"), 1.0)

    assert rookie.heat == pytest.approx(7.0 * 0.82 - 0.72)
    assert legend.heat == pytest.approx(7.0 * 1.4 - 0.72)


def test_speed_builds_combo_up_to_the_speed_ceiling():
    fast = _state(combo=1.0)
    update_combo(fast, 0.0, 250.0, 1.0)
    assert fast.combo == pytest.approx(1.4)

    capped = _state(combo=18.0)
    update_combo(capped, 0.0, 250.0, 1.0)
    assert capped.combo == pytest.approx(18.0)

    slow = _state(combo=1.0)
    update_combo(slow, 0.0, 220.0, 1.0)
    assert slow.combo == 1.0


def test_pressure_combo_is_clamped_at_max():
    state = _state(combo=19.9)

    update_combo(state, 50.0, 0.0, 1.0)

    assert state.combo == 20.0


def test_score_rate_formula(difficulty):
    state = _state(heat=50.0, combo=2.0)

    assert score_rate(state, 100.0, difficulty) == pytest.approx((24.0 + 2.4) * 2.0 * 1.6)


def test_score_accrues_over_time(difficulty):
    state = _state()

    accrue_score(state, 0.0, difficulty, 0.5)

    assert state.score == pytest.approx(12.0)


def test_zero_dt_changes_nothing(difficulty):
    state = _state(heat=30.0, combo=4.0, score=500.0)

    update_economy(state, [50.0, 120.0], 300.0, difficulty, 0.0)

    assert state.heat == 30.0
    assert state.combo == 4.0
    assert state.score == 500.0


def test_economy_stays_bounded_under_random_play(difficulty):
    rng = np.random.default_rng(11)
    state = _state()

    for _ in range(2000):
        distances = rng.uniform(1.0, 600.0, size=int(rng.integers(0, 12)))
        update_economy(state, distances, float(rng.uniform(0.0, 450.0)), difficulty, float(rng.uniform(0.0, 0.05)))
        state.score -= float(rng.uniform(0.0, 200.0))
        state.combo -= float(rng.uniform(0.0, 2.0))

        assert 0.0 <= state.heat <= 100.0
        assert 1.0 <= state.combo <= 20.0
        assert state.score >= 0.0
