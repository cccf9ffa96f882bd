"""
Entities living on the chase map.

This module holds the player vehicle, pursuit agents, ambient traffic,
static obstacles, pickups and hazard zones, plus the EntityStore that
creates and owns them for a single run.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
from .config_set import MapConfig, ModeConfig, SpawnPoint
from .constants import (
    METER_MAX,
    METER_MIN,
    PLAYER_START_BOOST,
    PLAYER_START_PULSE,
    OBSTACLE_COUNT,
    OBSTACLE_SPAWN_INSET,
    OBSTACLE_MIN_RADIUS,
    OBSTACLE_MAX_RADIUS,
    OBSTACLE_HUE_BASE,
    OBSTACLE_HUE_STEP,
    OBSTACLE_HUE_RANGE,
    TRAFFIC_COUNT,
    TRAFFIC_SPAWN_INSET,
    TRAFFIC_INITIAL_SPEED,
    TRAFFIC_TRUCK_EVERY,
    TRAFFIC_INITIAL_TIMER_MIN,
    TRAFFIC_INITIAL_TIMER_MAX,
    TRAFFIC_CAR_CONTACT_RADIUS,
    TRAFFIC_TRUCK_CONTACT_RADIUS,
    TRAFFIC_CAR_SPEED_MIN,
    TRAFFIC_CAR_SPEED_MAX,
    TRAFFIC_TRUCK_SPEED_MIN,
    TRAFFIC_TRUCK_SPEED_MAX,
    PICKUP_COUNT,
    PICKUP_SPAWN_INSET,
    AGENT_EXTRA_AT_START,
    AGENT_SPAWN_ANGLE_STEP,
    AGENT_SPAWN_BASE_DISTANCE,
    AGENT_SPAWN_DISTANCE_STEP,
    AGENT_HEAVY_EVERY,
    AGENT_INTERCEPTOR_EVERY,
    STANDARD_ACCEL_BIAS,
    STANDARD_SPEED_OFFSET,
    HEAVY_ACCEL_BIAS,
    HEAVY_SPEED_OFFSET,
    INTERCEPTOR_ACCEL_BIAS,
    INTERCEPTOR_SPEED_OFFSET,
    TWO_PI,
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class Vehicle:
    """Player vehicle with kinematics and saturating resource meters"""

    def __init__(self, x: float = 0.0, y: float = 0.0, heading: float = 0.0):
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        self.heading = heading
        self.angular_velocity = 0.0
        self._boost = PLAYER_START_BOOST
        self._pulse_charge = PLAYER_START_PULSE
        self._shield = 0.0

    @property
    def boost(self) -> float:
        return self._boost

    @boost.setter
    def boost(self, value: float) -> None:
        self._boost = _clamp(value, METER_MIN, METER_MAX)

    @property
    def pulse_charge(self) -> float:
        return self._pulse_charge

    @pulse_charge.setter
    def pulse_charge(self, value: float) -> None:
        self._pulse_charge = _clamp(value, METER_MIN, METER_MAX)

    @property
    def shield(self) -> float:
        """Remaining shield time in seconds"""
        return self._shield

    @shield.setter
    def shield(self, value: float) -> None:
        self._shield = max(0.0, value)

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)

    def place(self, spawn: SpawnPoint) -> None:
        """Move to a spawn point and come to a full stop"""
        self.x = spawn.x
        self.y = spawn.y
        self.vx = 0.0
        self.vy = 0.0
        self.heading = spawn.heading
        self.angular_velocity = 0.0


class AgentKind(Enum):
    STANDARD = "standard"
    HEAVY = "heavy"
    INTERCEPTOR = "interceptor"


@dataclass(frozen=True)
class KindTuning:
    accel_bias: float
    speed_offset: float


AGENT_KIND_TUNING: Dict[AgentKind, KindTuning] = {
    AgentKind.STANDARD: KindTuning(STANDARD_ACCEL_BIAS, STANDARD_SPEED_OFFSET),
    AgentKind.HEAVY: KindTuning(HEAVY_ACCEL_BIAS, HEAVY_SPEED_OFFSET),
    AgentKind.INTERCEPTOR: KindTuning(INTERCEPTOR_ACCEL_BIAS, INTERCEPTOR_SPEED_OFFSET),
}


def agent_kind_for_seed(seed: int) -> AgentKind:
    if seed % AGENT_HEAVY_EVERY == 0:
        return AgentKind.HEAVY
    if seed % AGENT_INTERCEPTOR_EVERY == 0:
        return AgentKind.INTERCEPTOR
    return AgentKind.STANDARD


class PursuitAgent:
    """AI vehicle that steers toward the player"""

    def __init__(self, x: float, y: float, kind: AgentKind = AgentKind.STANDARD):
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        self.heading = 0.0
        self.kind = kind
        self._stun = 0.0

    @property
    def stun(self) -> float:
        return self._stun

    @stun.setter
    def stun(self, value: float) -> None:
        self._stun = max(0.0, value)

    @property
    def is_stunned(self) -> bool:
        return self._stun > 0.0

    @property
    def tuning(self) -> KindTuning:
        return AGENT_KIND_TUNING[self.kind]

    @classmethod
    def spawn(cls, seed: int, anchor_x: float, anchor_y: float) -> "PursuitAgent":
        """Create an agent on a ring around the anchor, spread by seed"""
        distance = AGENT_SPAWN_BASE_DISTANCE + seed * AGENT_SPAWN_DISTANCE_STEP
        angle = seed * AGENT_SPAWN_ANGLE_STEP
        return cls(
            anchor_x + math.cos(angle) * distance,
            anchor_y + math.sin(angle) * distance,
            agent_kind_for_seed(seed),
        )


class TrafficKind(Enum):
    CAR = "car"
    TRUCK = "truck"


@dataclass(frozen=True)
class TrafficTuning:
    contact_radius: float
    speed_min: float
    speed_max: float


TRAFFIC_KIND_TUNING: Dict[TrafficKind, TrafficTuning] = {
    TrafficKind.CAR: TrafficTuning(TRAFFIC_CAR_CONTACT_RADIUS, TRAFFIC_CAR_SPEED_MIN, TRAFFIC_CAR_SPEED_MAX),
    TrafficKind.TRUCK: TrafficTuning(TRAFFIC_TRUCK_CONTACT_RADIUS, TRAFFIC_TRUCK_SPEED_MIN, TRAFFIC_TRUCK_SPEED_MAX),
}


class TrafficAgent:
    """Ambient vehicle wandering the map, independent of the chase"""

    def __init__(self, x: float, y: float, vx: float, vy: float,
                 lane_timer: float, kind: TrafficKind = TrafficKind.CAR):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.heading = math.atan2(vy, vx)
        self.lane_timer = lane_timer
        self.kind = kind

    @property
    def tuning(self) -> TrafficTuning:
        return TRAFFIC_KIND_TUNING[self.kind]


@dataclass(frozen=True)
class Obstacle:
    x: float
    y: float
    radius: float
    hue: int
    rotation: float = 0.0


class PickupType(Enum):
    BOOST = "boost"
    SCORE = "score"
    SHIELD = "shield"
    PULSE_CELL = "pulse_cell"


PICKUP_CYCLE = (PickupType.BOOST, PickupType.SCORE, PickupType.SHIELD, PickupType.PULSE_CELL)


@dataclass
class Pickup:
    x: float
    y: float
    type: PickupType
    active: bool = True
    phase: float = 0.0

    def consume(self) -> None:
        self.active = False


@dataclass
class HazardZone:
    x: float
    y: float
    radius: float
    ttl: float  # seconds left


class EntityStore:
    """Owns every entity of a run"""

    def __init__(self, player: Optional[Vehicle] = None):
        self.player = player or Vehicle()
        self.agents: List[PursuitAgent] = []
        self.traffic: List[TrafficAgent] = []
        self.obstacles: List[Obstacle] = []
        self.pickups: List[Pickup] = []
        self.hazard_zones: List[HazardZone] = []

    @classmethod
    def populate(cls, map_config: MapConfig, mode: ModeConfig, spawn: SpawnPoint, rng) -> "EntityStore":
        """
        Build the entities for a fresh run.

        Args:
            map_config: Map the run takes place on
            mode: Game mode, decides the initial pursuit agent count
            spawn: Player spawn point, also the anchor for the first agents
            rng: numpy random Generator

        Returns:
            A fully populated EntityStore
        """
        player = Vehicle()
        player.place(spawn)
        store = cls(player)
        store.obstacles = _create_obstacles(map_config, rng)
        store.traffic = _create_traffic(map_config, rng)
        store.pickups = _create_pickups(map_config, rng)
        for _ in range(mode.chaser_count + AGENT_EXTRA_AT_START):
            store.spawn_agent(spawn.x, spawn.y)
        return store

    def spawn_agent(self, anchor_x: float, anchor_y: float) -> PursuitAgent:
        agent = PursuitAgent.spawn(len(self.agents), anchor_x, anchor_y)
        self.agents.append(agent)
        return agent

    def active_pickups(self) -> List[Pickup]:
        return [p for p in self.pickups if p.active]


def _random_point(map_config: MapConfig, inset: float, rng):
    x = rng.uniform(-map_config.half_width + inset, map_config.half_width - inset)
    y = rng.uniform(-map_config.half_height + inset, map_config.half_height - inset)
    return float(x), float(y)


def _create_obstacles(map_config: MapConfig, rng) -> List[Obstacle]:
    obstacles = []
    for i in range(OBSTACLE_COUNT):
        x, y = _random_point(map_config, OBSTACLE_SPAWN_INSET, rng)
        obstacles.append(Obstacle(
            x=x,
            y=y,
            radius=float(rng.uniform(OBSTACLE_MIN_RADIUS, OBSTACLE_MAX_RADIUS)),
            hue=OBSTACLE_HUE_BASE + (i * OBSTACLE_HUE_STEP) % OBSTACLE_HUE_RANGE,
            rotation=float(rng.uniform(0.0, TWO_PI)),
        ))
    return obstacles


def _create_traffic(map_config: MapConfig, rng) -> List[TrafficAgent]:
    traffic = []
    for i in range(TRAFFIC_COUNT):
        x, y = _random_point(map_config, TRAFFIC_SPAWN_INSET, rng)
        kind = TrafficKind.TRUCK if i % TRAFFIC_TRUCK_EVERY == 0 else TrafficKind.CAR
        traffic.append(TrafficAgent(
            x=x,
            y=y,
            vx=float(rng.uniform(-TRAFFIC_INITIAL_SPEED, TRAFFIC_INITIAL_SPEED)),
            vy=float(rng.uniform(-TRAFFIC_INITIAL_SPEED, TRAFFIC_INITIAL_SPEED)),
            lane_timer=float(rng.uniform(TRAFFIC_INITIAL_TIMER_MIN, TRAFFIC_INITIAL_TIMER_MAX)),
            kind=kind,
        ))
    return traffic


def _create_pickups(map_config: MapConfig, rng) -> List[Pickup]:
    pickups = []
    for i in range(PICKUP_COUNT):
        x, y = _random_point(map_config, PICKUP_SPAWN_INSET, rng)
        pickups.append(Pickup(
            x=x,
            y=y,
            type=PICKUP_CYCLE[i % len(PICKUP_CYCLE)],
            phase=float(rng.uniform(0.0, TWO_PI)),
        ))
    return pickups
