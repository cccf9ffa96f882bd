"""
Pursuit steering for the chasing agents.

Each agent accelerates straight at the player. The push grows as the gap
closes (capped inverse-distance term) and as global heat rises, so the
chase escalates without tuning agents individually.
"""

import math
from typing import List
from .config_set import MapConfig, ModeConfig, WeatherConfig, DifficultyConfig
from .entities import PursuitAgent, Vehicle
from .vehicle_physics import clamp_to_map, limit_speed
from .constants import (
    MIN_DISTANCE,
    PRESSURE_DISTANCE_GAIN,
    PRESSURE_DISTANCE_CAP,
    PRESSURE_HEAT_COEFFICIENT,
    HEAT_SPEED_BONUS,
    STUN_VELOCITY_DECAY,
)


def pressure_factor(distance: float, heat: float) -> float:
    """Acceleration multiplier for an agent at the given distance from the player"""
    distance = max(MIN_DISTANCE, distance)
    return 1.0 + min(PRESSURE_DISTANCE_CAP, PRESSURE_DISTANCE_GAIN / distance) + heat * PRESSURE_HEAT_COEFFICIENT


def agent_top_speed(agent: PursuitAgent, mode: ModeConfig, heat: float) -> float:
    return mode.chaser_max_speed + heat * HEAT_SPEED_BONUS + agent.tuning.speed_offset


def steer_agent(agent: PursuitAgent,
                player: Vehicle,
                heat: float,
                mode: ModeConfig,
                weather: WeatherConfig,
                difficulty: DifficultyConfig,
                map_config: MapConfig,
                dt: float) -> float:
    """
    Advance one pursuit agent by one tick.

    Returns:
        Distance to the player measured before the move, floored at MIN_DISTANCE
    """
    dx = player.x - agent.x
    dy = player.y - agent.y
    distance = max(MIN_DISTANCE, math.hypot(dx, dy))
    nx = dx / distance
    ny = dy / distance

    if agent.is_stunned:
        agent.stun -= dt
        agent.vx *= STUN_VELOCITY_DECAY
        agent.vy *= STUN_VELOCITY_DECAY
    else:
        accel = (mode.chaser_accel * pressure_factor(distance, heat)
                 * agent.tuning.accel_bias * difficulty.chaser_scale)
        agent.vx += nx * accel * dt
        agent.vy += ny * accel * dt

    damping = mode.chaser_friction * weather.drag
    agent.vx *= damping
    agent.vy *= damping

    limit_speed(agent, agent_top_speed(agent, mode, heat))

    agent.x += agent.vx * dt
    agent.y += agent.vy * dt
    if agent.vx or agent.vy:
        agent.heading = math.atan2(agent.vy, agent.vx)
    clamp_to_map(agent, map_config)

    return distance


def steer_agents(agents: List[PursuitAgent],
                 player: Vehicle,
                 heat: float,
                 mode: ModeConfig,
                 weather: WeatherConfig,
                 difficulty: DifficultyConfig,
                 map_config: MapConfig,
                 dt: float) -> List[float]:
    """Advance every agent and return their pre-move distances to the player"""
    return [
        steer_agent(agent, player, heat, mode, weather, difficulty, map_config, dt)
        for agent in agents
    ]
