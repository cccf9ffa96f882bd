import numpy as np
import pytest

from pursuit.config_set import ConfigError, GameData
from pursuit.engine import ChaseEngine
from pursuit.entities import Obstacle, PursuitAgent
from pursuit.score_store import InMemoryScoreStore
from pursuit.vehicle_physics import ControlIntent


def _engine(game_data, store=None, **kwargs):
    return ChaseEngine(game_data, score_store=store or InMemoryScoreStore(), seed=42, **kwargs)


def _quiet_engine(game_data, store=None, **kwargs):
    """Engine with an empty map around the player"""
    engine = _engine(game_data, store, **kwargs)
    engine.store.obstacles = []
    engine.store.traffic = []
    engine.store.pickups = []
    engine.store.agents = []
    engine.drain_events()
    return engine


def _texts(engine):
    return [message.text for message in engine.drain_events()]


def test_empty_library_refuses_to_start(mode):
    with pytest.raises(ConfigError):
        ChaseEngine(GameData(maps=[], modes=[mode]))


def test_unknown_map_id_is_rejected(game_data):
    with pytest.raises(ConfigError):
        _engine(game_data, map_id="nowhere")


def test_new_run_populates_entities(game_data):
    engine = _engine(game_data)

    assert len(engine.store.agents) == engine.mode.chaser_count + 2
    assert len(engine.store.obstacles) == 110
    assert len(engine.store.traffic) == 34
    assert len(engine.store.pickups) == 65
    assert engine.state.lives == engine.difficulty.lives
    assert _texts(engine) == ["Run started. Build combo with near misses + objectives."]


def test_energy_pulse_consumes_charge_and_stuns_nearby_agents(game_data):
    engine = _quiet_engine(game_data)
    player = engine.store.player
    near = PursuitAgent(player.x + 100.0, player.y)
    near.vx = -50.0
    far = PursuitAgent(player.x + 600.0, player.y)
    engine.store.agents = [near, far]
    player.pulse_charge = 30.0

    engine.tick(0.0, ControlIntent(fire_pulse=True))

    assert player.pulse_charge == pytest.approx(6.0)
    assert near.stun == pytest.approx(1.8)
    assert near.vx == pytest.approx(20.0)
    assert not far.is_stunned
    assert engine.state.score == pytest.approx(90.0)
    assert _texts(engine) == ["Energy pulse! Disabled 1 chasers."]


def test_energy_pulse_with_low_charge_changes_nothing(game_data):
    engine = _quiet_engine(game_data)
    player = engine.store.player
    agent = PursuitAgent(player.x + 100.0, player.y)
    engine.store.agents = [agent]
    player.pulse_charge = 10.0

    engine.tick(0.0, ControlIntent(fire_pulse=True))

    assert player.pulse_charge == 10.0
    assert not agent.is_stunned
    assert engine.state.flash == 0.0
    assert _texts(engine) == ["Pulse charge low. Collect pulse cells."]


def test_last_life_contact_resets_the_run_and_saves_best(game_data):
    scores = InMemoryScoreStore()
    engine = _quiet_engine(game_data, scores)
    player = engine.store.player
    engine.store.agents = [PursuitAgent(player.x + 20.0, player.y)]
    engine.state.lives = 1
    engine.state.score = 5000.0
    old_state = engine.state

    engine.tick(0.01)

    assert engine.state is not old_state
    assert engine.state.lives == engine.difficulty.lives
    assert engine.state.score == 0.0
    assert engine.state.best_score == 5000.0
    assert scores.get(engine.score_key) == 5000.0
    assert engine.runs_ended == 1
    assert engine.lives_lost == 1
    assert len(engine.store.obstacles) == 110
    assert len(engine.store.agents) == engine.mode.chaser_count + 2
    assert _texts(engine)[-1] == "Run ended. Restarted."


def test_life_lost_respawns_with_shield(game_data):
    engine = _quiet_engine(game_data)
    player = engine.store.player
    engine.store.agents = [PursuitAgent(player.x + 20.0, player.y)]

    engine.tick(0.01)

    assert engine.state.lives == engine.difficulty.lives - 1
    assert engine.store.player.shield == pytest.approx(2.5)
    assert engine.runs_ended == 0


def test_wave_four_spawns_three_agents_and_a_hazard_burst(game_data):
    engine = _quiet_engine(game_data)
    engine.state.wave = 3
    engine.state.heat = 60.0
    engine.state.next_wave_heat = 50.0

    engine.tick(0.01)

    assert engine.state.wave == 4
    assert len(engine.store.agents) == 3
    assert len(engine.store.hazard_zones) == 5
    assert engine.state.next_wave_heat == 65.0
    assert "Wave 4! Reinforcements inbound." in _texts(engine)


def test_agent_count_only_grows_across_waves(game_data):
    engine = _quiet_engine(game_data)
    counts = []

    for _ in range(4):
        engine.state.heat = engine.state.next_wave_heat + 1.0
        engine.tick(0.001)
        counts.append(len(engine.store.agents))

    assert counts == sorted(set(counts))
    assert engine.state.wave == 5


def test_heat_held_at_ceiling_starts_only_one_wave(game_data):
    engine = _quiet_engine(game_data)
    engine.state.wave = 6
    engine.state.next_wave_heat = 95.0
    engine.state.heat = 100.0

    for _ in range(10):
        engine.tick(1 / 60)

    assert engine.state.wave == 7
    assert len(engine.store.agents) == 4
    assert engine.state.heat >= 95.0


def test_zero_dt_tick_is_idempotent(game_data):
    engine = _quiet_engine(game_data)
    engine.state.heat = 15.0
    engine.state.combo = 3.0
    engine.state.score = 250.0
    player = engine.store.player
    position = (player.x, player.y)

    for _ in range(5):
        engine.tick(0.0)

    assert engine.state.elapsed == 0.0
    assert engine.state.heat == 15.0
    assert engine.state.combo == 3.0
    assert engine.state.score == 250.0
    assert (player.x, player.y) == position


def test_zero_dt_tick_on_full_map_does_not_crash(game_data):
    engine = _engine(game_data)
    heat = engine.state.heat

    for _ in range(10):
        engine.tick(0.0)

    assert engine.state.elapsed == 0.0
    assert engine.state.heat == heat


def test_zero_dt_tick_does_not_recharge_contacts(game_data):
    engine = _quiet_engine(game_data)
    player = engine.store.player
    engine.store.obstacles = [Obstacle(player.x + 10.0, player.y, 20.0, 170)]
    engine.state.score = 1000.0
    engine.state.combo = 10.0
    player.shield = 0.0

    for _ in range(4):
        engine.tick(0.0)

    assert engine.state.score == 1000.0
    assert engine.state.combo == 10.0
    assert engine.resolver.reporter.total_collisions == 0
    assert _texts(engine) == []


def test_triggers_run_in_fixed_order(game_data):
    engine = _quiet_engine(game_data)
    player = engine.store.player
    player.pulse_charge = 50.0

    engine.tick(0.0, ControlIntent(restart=True, fire_pulse=True, cycle_map=True))

    assert engine.map.id == "test-grid"
    assert engine.store.player.pulse_charge == 100.0
    assert _texts(engine) == ["Run started. Build combo with near misses + objectives."]


def test_tick_dt_is_clamped(game_data):
    engine = _quiet_engine(game_data)

    engine.tick(1.0)
    assert engine.state.elapsed == pytest.approx(0.05)

    engine.tick(-1.0)
    assert engine.state.elapsed == pytest.approx(0.05)


def test_paused_engine_does_not_advance(game_data):
    engine = _quiet_engine(game_data)
    engine.tick(0.0, ControlIntent(toggle_pause=True))
    assert engine.state.paused
    player = engine.store.player
    position = (player.x, player.y)

    engine.tick(0.05, ControlIntent(throttle=True, fire_pulse=True, restart=True))

    assert engine.state.elapsed == 0.0
    assert (player.x, player.y) == position
    assert player.pulse_charge == 100.0
    assert _texts(engine) == ["Paused"]

    engine.tick(0.05, ControlIntent(throttle=True, toggle_pause=True))
    assert not engine.state.paused
    assert engine.state.elapsed == pytest.approx(0.05)
    assert _texts(engine) == ["Resumed"]


def test_restart_keeps_only_better_scores(game_data):
    scores = InMemoryScoreStore()
    engine = _quiet_engine(game_data, scores)

    engine.state.score = 1234.7
    engine.tick(0.0, ControlIntent(restart=True))
    assert scores.get(engine.score_key) == 1234.0
    assert engine.state.best_score == 1234.0

    engine.state.score = 100.0
    engine.tick(0.0, ControlIntent(restart=True))
    assert scores.get(engine.score_key) == 1234.0


def test_zero_score_is_never_saved(game_data):
    scores = InMemoryScoreStore()
    engine = _quiet_engine(game_data, scores)

    assert engine.save_best_score() is False
    assert scores.get(engine.score_key) is None


def test_cycle_map_wraps_and_restarts(game_data):
    engine = _quiet_engine(game_data)
    engine.tick(0.05)

    engine.tick(0.0, ControlIntent(cycle_map=True))
    assert engine.map.id == "test-loop"
    assert engine.state.elapsed == 0.0

    engine.tick(0.0, ControlIntent(cycle_map=True))
    assert engine.map.id == "test-grid"


def test_best_score_key_follows_selection(game_data):
    engine = _quiet_engine(game_data)

    engine.select(difficulty_id="legend")

    assert engine.score_key == "pursuit-best-test-grid-arcade-legend"
    assert engine.state.lives == 2


def test_weather_change_keeps_the_run_going(game_data):
    engine = _quiet_engine(game_data)
    engine.tick(0.05)
    state = engine.state

    engine.set_weather("storm")

    assert engine.weather.lightning
    assert engine.state is state


def test_state_stays_bounded_during_play(game_data):
    engine = _engine(game_data, weather_id="storm", difficulty_id="legend")
    rng = np.random.default_rng(9)

    for step in range(900):
        intent = ControlIntent(
            throttle=bool(rng.random() < 0.8),
            reverse=bool(rng.random() < 0.1),
            steer=int(rng.integers(-1, 2)),
            brake=bool(rng.random() < 0.1),
            boost=bool(rng.random() < 0.3),
            fire_pulse=step % 90 == 0,
        )
        engine.tick(1 / 60, intent)

        state = engine.state
        player = engine.store.player
        assert 0.0 <= state.heat <= 100.0
        assert 1.0 <= state.combo <= 20.0
        assert state.score >= 0.0
        assert 0.0 <= player.boost <= 100.0
        assert 0.0 <= player.pulse_charge <= 100.0
        assert player.shield >= 0.0
        assert state.best_score >= state.score


def test_snapshot_lists_only_active_pickups(game_data):
    engine = _engine(game_data)
    engine.store.pickups[0].consume()

    snapshot = engine.get_snapshot()

    assert len(snapshot["pickups"]) == 64
    assert snapshot["lives"] == engine.state.lives
    assert snapshot["objective"] == "Survive 25s"
    assert set(snapshot["player"]) >= {"x", "y", "heading", "boost", "pulse_charge", "shield"}


def test_snapshot_carries_weather_and_recent_contacts(game_data):
    engine = _quiet_engine(game_data, weather_id="fog")
    player = engine.store.player
    engine.store.obstacles = [Obstacle(player.x + 10.0, player.y, 20.0, 170)]

    engine.tick(1 / 60)
    snapshot = engine.get_snapshot()

    assert snapshot["visibility"] == 0.72
    assert snapshot["particles"] == 80
    assert [c["kind"] for c in snapshot["recent_contacts"]] == ["obstacle"]
