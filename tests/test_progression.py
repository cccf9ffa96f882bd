import numpy as np
import pytest

from pursuit.entities import HazardZone
from pursuit.progression import (
    advance_objective,
    check_wave_escalation,
    reinforcements_for_wave,
    spawn_hazard_burst,
    wave_triggers_hazard_burst,
)
from pursuit.run_state import RunState, Survive, CollectPickups, ReachHeat


def test_expired_survive_moves_to_collect_or_reach_heat():
    collect, completion = advance_objective(Survive(0.0), 0.0, 0.016, roll=0.1)
    assert collect == CollectPickups(6)
    assert completion.bonus == 1200.0
    assert completion.message == "Objective complete +1200"

    heat, completion = advance_objective(Survive(0.0), 0.0, 0.016, roll=0.9)
    assert heat == ReachHeat(55.0)
    assert completion.bonus == 1200.0


def test_expired_survive_completes_even_on_zero_dt():
    objective, completion = advance_objective(Survive(0.0), 0.0, 0.0, roll=0.3)

    assert not isinstance(objective, Survive)
    assert completion is not None


def test_survive_counts_down():
    objective, completion = advance_objective(Survive(10.0), 0.0, 1.0, roll=0.5)

    assert objective == Survive(9.0)
    assert completion is None


def test_collect_pickups_waits_for_resolver():
    objective, completion = advance_objective(CollectPickups(2), 0.0, 1.0, roll=0.5)
    assert objective == CollectPickups(2)
    assert completion is None

    objective, completion = advance_objective(CollectPickups(0), 0.0, 1.0, roll=0.5)
    assert objective == Survive(34.0)
    assert completion.bonus == 1700.0
    assert completion.message == "Pickup objective complete +1700"


def test_reach_heat_completes_at_target():
    objective, completion = advance_objective(ReachHeat(55.0), 54.9, 0.1, roll=0.5)
    assert objective == ReachHeat(55.0)
    assert completion is None

    objective, completion = advance_objective(ReachHeat(55.0), 55.0, 0.1, roll=0.5)
    assert objective == Survive(36.0)
    assert completion.bonus == 2200.0


def test_unknown_objective_is_rejected():
    with pytest.raises(TypeError):
        advance_objective("survive", 0.0, 0.1, roll=0.5)


def test_objective_descriptions():
    assert Survive(24.2).describe() == "Survive 25s"
    assert CollectPickups(3).describe() == "Collect 3 pickups"
    assert ReachHeat(55.0).describe() == "Reach Heat 55%"


def test_reinforcements_grow_every_third_wave():
    assert reinforcements_for_wave(2) == 2
    assert reinforcements_for_wave(4) == 3
    assert reinforcements_for_wave(9) == 5


def test_wave_escalates_when_heat_reaches_threshold():
    state = RunState(lives=3)
    state.heat = 19.9
    assert check_wave_escalation(state) == 0
    assert state.wave == 1

    state.heat = 20.0
    assert check_wave_escalation(state) == 2
    assert state.wave == 2
    assert state.next_wave_heat == 35.0


def test_wave_threshold_is_capped():
    state = RunState(lives=3)
    state.next_wave_heat = 90.0
    state.heat = 100.0

    check_wave_escalation(state)

    assert state.next_wave_heat == 95.0
    assert state.wave == 2


def test_heat_held_at_ceiling_starts_only_one_wave():
    state = RunState(lives=3)
    state.wave = 6
    state.next_wave_heat = 95.0
    state.heat = 100.0

    spawned = [check_wave_escalation(state) for _ in range(10)]

    assert state.wave == 7
    assert spawned == [4] + [0] * 9

    state.heat = 94.0
    assert check_wave_escalation(state) == 0
    state.heat = 96.0
    assert check_wave_escalation(state) == 4
    assert state.wave == 8


def test_even_waves_trigger_hazard_bursts():
    assert wave_triggers_hazard_burst(4)
    assert not wave_triggers_hazard_burst(3)


def test_hazard_burst_surrounds_the_player():
    zones = [HazardZone(0.0, 0.0, 40.0, 1.0)]

    burst = spawn_hazard_burst(zones, 100.0, -50.0, np.random.default_rng(2))

    assert len(burst) == 5
    assert len(zones) == 6
    for zone in burst:
        assert abs(zone.x - 100.0) <= 260.0
        assert abs(zone.y + 50.0) <= 260.0
        assert 30.0 <= zone.radius <= 90.0
        assert 4.5 <= zone.ttl <= 8.5
