"""
Kinematic integration for the player vehicle and ambient traffic.

The player model is arcade style: steering accumulates angular velocity,
thrust acts along the heading, drag is frame-rate independent and the
map edge is a hard wall.
"""

import math
from dataclasses import dataclass
from typing import List
from .config_set import MapConfig, ModeConfig, WeatherConfig
from .entities import Vehicle, TrafficAgent, HazardZone
from .constants import (
    MAP_BORDER_MARGIN,
    BRAKE_TURN_MULTIPLIER,
    ANGULAR_DAMPING,
    ANGULAR_DAMPING_BRAKING,
    BOOST_THRUST,
    BOOST_DRAIN_RATE,
    BOOST_REGEN_RATE,
    PULSE_REGEN_RATE,
    BOOST_SPEED_BONUS,
    FRICTION_REFERENCE_FPS,
    TRAFFIC_LANE_TIMER_MIN,
    TRAFFIC_LANE_TIMER_MAX,
    TWO_PI,
)


@dataclass(frozen=True)
class ControlIntent:
    """Driver input sampled once per tick"""
    throttle: bool = False
    reverse: bool = False
    steer: int = 0  # -1 left, 0 straight, 1 right
    brake: bool = False
    boost: bool = False
    # One-shot triggers, each acted on by the tick that carries it
    fire_pulse: bool = False
    toggle_pause: bool = False
    restart: bool = False
    cycle_map: bool = False


NO_INPUT = ControlIntent()


def clamp_to_map(entity, map_config: MapConfig) -> None:
    """Keep an entity inside the map interior, inset by the border margin"""
    max_x = map_config.half_width - MAP_BORDER_MARGIN
    max_y = map_config.half_height - MAP_BORDER_MARGIN
    entity.x = max(-max_x, min(max_x, entity.x))
    entity.y = max(-max_y, min(max_y, entity.y))


def limit_speed(entity, top_speed: float) -> None:
    """Rescale velocity so its magnitude does not exceed top_speed, keeping direction"""
    speed = math.hypot(entity.vx, entity.vy)
    if speed > top_speed > 0:
        ratio = top_speed / speed
        entity.vx *= ratio
        entity.vy *= ratio
    elif top_speed <= 0:
        entity.vx = 0.0
        entity.vy = 0.0


def player_top_speed(mode: ModeConfig) -> float:
    return mode.max_speed + BOOST_SPEED_BONUS


def integrate_vehicle(vehicle: Vehicle,
                      intent: ControlIntent,
                      mode: ModeConfig,
                      weather: WeatherConfig,
                      map_config: MapConfig,
                      dt: float) -> None:
    """
    Advance the player vehicle by one tick.

    Args:
        vehicle: Player vehicle, mutated in place
        intent: Control input for this tick
        mode: Game mode tuning
        weather: Active weather, its drag scales friction
        map_config: Map used for the boundary clamp
        dt: Tick length in seconds
    """
    # Steering
    steer_gain = BRAKE_TURN_MULTIPLIER if intent.brake else 1.0
    vehicle.angular_velocity += intent.steer * mode.turn_speed * dt * steer_gain
    vehicle.angular_velocity *= ANGULAR_DAMPING_BRAKING if intent.brake else ANGULAR_DAMPING
    vehicle.heading = (vehicle.heading + vehicle.angular_velocity * dt) % TWO_PI

    heading_x = math.cos(vehicle.heading)
    heading_y = math.sin(vehicle.heading)

    # Boost drains while held, otherwise regenerates
    boost_force = 0.0
    if intent.boost and vehicle.boost > 0:
        boost_force = BOOST_THRUST
        vehicle.boost -= BOOST_DRAIN_RATE * dt
    else:
        vehicle.boost += BOOST_REGEN_RATE * dt
    vehicle.pulse_charge += PULSE_REGEN_RATE * dt

    thrust = (mode.acceleration if intent.throttle else 0.0) + boost_force
    reverse = mode.reverse_acceleration if intent.reverse else 0.0
    vehicle.vx += heading_x * (thrust - reverse) * dt
    vehicle.vy += heading_y * (thrust - reverse) * dt

    friction = (mode.brake_friction if intent.brake else mode.friction) * weather.drag
    decay = friction ** (dt * FRICTION_REFERENCE_FPS)
    vehicle.vx *= decay
    vehicle.vy *= decay

    limit_speed(vehicle, player_top_speed(mode))

    vehicle.x += vehicle.vx * dt
    vehicle.y += vehicle.vy * dt
    clamp_to_map(vehicle, map_config)


def update_traffic(traffic: List[TrafficAgent], map_config: MapConfig, dt: float, rng) -> None:
    """Move ambient traffic, re-rolling direction and speed when a lane timer expires"""
    for vehicle in traffic:
        vehicle.lane_timer -= dt
        if vehicle.lane_timer <= 0:
            angle = float(rng.uniform(0.0, TWO_PI))
            tuning = vehicle.tuning
            speed = float(rng.uniform(tuning.speed_min, tuning.speed_max))
            vehicle.vx = math.cos(angle) * speed
            vehicle.vy = math.sin(angle) * speed
            vehicle.lane_timer = float(rng.uniform(TRAFFIC_LANE_TIMER_MIN, TRAFFIC_LANE_TIMER_MAX))

        vehicle.x += vehicle.vx * dt
        vehicle.y += vehicle.vy * dt
        vehicle.heading = math.atan2(vehicle.vy, vehicle.vx)
        clamp_to_map(vehicle, map_config)


def age_hazard_zones(zones: List[HazardZone], dt: float) -> List[HazardZone]:
    """Count hazard lifetimes down and return the zones still alive"""
    for zone in zones:
        zone.ttl -= dt
    return [zone for zone in zones if zone.ttl > 0]
