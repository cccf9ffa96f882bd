import math

import pytest

from pursuit.entities import PursuitAgent, AgentKind, Vehicle
from pursuit.pursuit_steering import pressure_factor, agent_top_speed, steer_agent, steer_agents


def _player(x=0.0, y=0.0):
    player = Vehicle()
    player.x = x
    player.y = y
    return player


def test_pressure_factor_is_capped_close_to_the_player():
    assert pressure_factor(0.0, 0.0) == pytest.approx(1.0 + 3.4)
    assert pressure_factor(10.0, 0.0) == pytest.approx(1.0 + 3.4)


def test_pressure_factor_grows_with_heat_and_shrinking_distance():
    assert pressure_factor(1000.0, 0.0) == pytest.approx(1.42)
    assert pressure_factor(1000.0, 50.0) == pytest.approx(1.42 + 0.9)
    assert pressure_factor(200.0, 0.0) > pressure_factor(400.0, 0.0)


def test_agent_accelerates_toward_player(mode, clear_weather, difficulty, map_config):
    agent = PursuitAgent(500.0, 0.0)

    distance = steer_agent(agent, _player(), 0.0, mode, clear_weather, difficulty, map_config, 0.05)

    assert distance == pytest.approx(500.0)
    assert agent.vx < 0
    assert agent.vy == pytest.approx(0.0)
    assert agent.x < 500.0
    assert agent.heading == pytest.approx(math.pi)


def test_stunned_agent_coasts_and_recovers(mode, clear_weather, difficulty, map_config):
    agent = PursuitAgent(500.0, 0.0)
    agent.vx = 100.0
    agent.stun = 0.5

    steer_agent(agent, _player(), 0.0, mode, clear_weather, difficulty, map_config, 0.1)

    assert agent.stun == pytest.approx(0.4)
    assert agent.vx == pytest.approx(100.0 * 0.92 * 0.985)

    agent.stun = 0.05
    steer_agent(agent, _player(), 0.0, mode, clear_weather, difficulty, map_config, 0.1)
    assert agent.stun == 0.0
    assert not agent.is_stunned


@pytest.mark.parametrize("kind, cap", [
    (AgentKind.STANDARD, 300.0),
    (AgentKind.HEAVY, 275.0),
    (AgentKind.INTERCEPTOR, 330.0),
])
def test_agent_speed_cap_depends_on_kind(kind, cap, mode, clear_weather, difficulty, map_config):
    agent = PursuitAgent(500.0, 0.0, kind)
    agent.vx = 2000.0

    steer_agent(agent, _player(), 0.0, mode, clear_weather, difficulty, map_config, 0.01)

    assert agent_top_speed(agent, mode, 0.0) == pytest.approx(cap)
    assert math.hypot(agent.vx, agent.vy) == pytest.approx(cap)


def test_heat_raises_agent_top_speed(mode):
    agent = PursuitAgent(0.0, 0.0)

    assert agent_top_speed(agent, mode, 40.0) == pytest.approx(300.0 + 80.0)


def test_agent_on_top_of_player_does_not_divide_by_zero(mode, clear_weather, difficulty, map_config):
    agent = PursuitAgent(0.0, 0.0)

    distance = steer_agent(agent, _player(), 0.0, mode, clear_weather, difficulty, map_config, 0.05)

    assert distance == 1.0
    assert math.isfinite(agent.x) and math.isfinite(agent.vx)


def test_steer_agents_reports_pre_move_distances(mode, clear_weather, difficulty, map_config):
    agents = [PursuitAgent(300.0, 0.0), PursuitAgent(0.0, -400.0)]

    distances = steer_agents(agents, _player(), 0.0, mode, clear_weather, difficulty, map_config, 0.05)

    assert distances == [pytest.approx(300.0), pytest.approx(400.0)]


def test_agent_kind_comes_from_spawn_seed():
    assert PursuitAgent.spawn(0, 0.0, 0.0).kind is AgentKind.HEAVY
    assert PursuitAgent.spawn(7, 0.0, 0.0).kind is AgentKind.INTERCEPTOR
    assert PursuitAgent.spawn(3, 0.0, 0.0).kind is AgentKind.STANDARD
    assert PursuitAgent.spawn(35, 0.0, 0.0).kind is AgentKind.HEAVY
