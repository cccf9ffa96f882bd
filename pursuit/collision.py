"""
Collision and pickup resolution.

This module detects proximity events between the player and every other
entity after movement, applies their effect on the run state and keeps a
bounded history of what happened for inspection and observations.
"""

import math
import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any
from .config_set import MapConfig, pick_spawn_point
from .entities import EntityStore, PickupType, Vehicle
from .run_state import RunState, EventLog, CollectPickups, announce
from .constants import (
    MIN_DISTANCE,
    PLAYER_RADIUS,
    OBSTACLE_BUMP_IMPULSE,
    OBSTACLE_COMBO_PENALTY,
    OBSTACLE_SCORE_PENALTY,
    OBSTACLE_SHAKE,
    HAZARD_CONTACT_MARGIN,
    HAZARD_VELOCITY_DAMPING,
    HAZARD_SCORE_BLEED,
    HAZARD_COMBO_BLEED,
    PICKUP_RADIUS,
    PICKUP_PHASE_RATE,
    PICKUP_BOOST_AMOUNT,
    PICKUP_BOOST_SCORE,
    PICKUP_SCORE_AMOUNT,
    PICKUP_SCORE_COMBO,
    PICKUP_SHIELD_AMOUNT,
    PICKUP_PULSE_AMOUNT,
    SHIELD_MAX,
    TRAFFIC_SHIELD_COST,
    TRAFFIC_SHIELD_SCORE,
    TRAFFIC_VELOCITY_DAMPING,
    TRAFFIC_COMBO_PENALTY,
    TRAFFIC_SCORE_PENALTY,
    TRAFFIC_SHAKE,
    AGENT_CONTACT_RADIUS,
    AGENT_SHIELD_COST,
    AGENT_SHIELD_REPEL,
    AGENT_SHIELD_SCORE,
    RESPAWN_SHIELD,
    RESPAWN_PULSE_BONUS,
    RESPAWN_SHAKE,
    NEAR_MISS_DISTANCE,
    NEAR_MISS_SPEED,
    NEAR_MISS_COOLDOWN,
    NEAR_MISS_COMBO,
    NEAR_MISS_SCORE,
    MAX_COLLISION_HISTORY,
)

logger = logging.getLogger(__name__)


class CollisionKind(Enum):
    OBSTACLE = "obstacle"
    PICKUP = "pickup"
    TRAFFIC = "traffic"
    TRAFFIC_SHIELDED = "traffic_shielded"
    AGENT_BLOCKED = "agent_blocked"
    LIFE_LOST = "life_lost"
    NEAR_MISS = "near_miss"


class ResolveOutcome(Enum):
    """What the engine has to do after resolution"""
    NONE = "none"
    RESPAWNED = "respawned"
    RUN_ENDED = "run_ended"


class CollisionEvent:
    """A single resolved contact"""

    def __init__(self, kind: CollisionKind, position: Tuple[float, float], timestamp: float):
        """
        Initialize collision event.

        Args:
            kind: What the player touched and how it was resolved
            position: Player position (x, y) at the time of contact
            timestamp: Simulation time when the contact happened
        """
        self.kind = kind
        self.position = position
        self.timestamp = timestamp

    def __str__(self) -> str:
        return f"Collision: {self.kind.value} at ({self.position[0]:.0f}, {self.position[1]:.0f}) t={self.timestamp:.1f}s"


class CollisionReporter:
    """
    Resolved contacts of the current run.

    The per-kind counters and total_collisions count every contact since the
    last reset, while collision_history only keeps the latest
    MAX_COLLISION_HISTORY events for time-window queries.
    """

    def __init__(self):
        self.collision_history: List[CollisionEvent] = []
        self.total_collisions = 0
        self.collision_stats: Dict[CollisionKind, int] = {kind: 0 for kind in CollisionKind}

    def report(self, kind: CollisionKind, position: Tuple[float, float], timestamp: float) -> CollisionEvent:
        event = CollisionEvent(kind, position, timestamp)
        self.collision_history.append(event)
        self.total_collisions += 1
        self.collision_stats[kind] += 1

        # Maintain history size limit
        if len(self.collision_history) > MAX_COLLISION_HISTORY:
            self.collision_history.pop(0)
        return event

    def get_recent_collisions(self, now: float, max_age: float = 1.0) -> List[CollisionEvent]:
        """Get the contacts that happened within max_age seconds of now"""
        cutoff_time = now - max_age
        return [c for c in self.collision_history if c.timestamp > cutoff_time]

    def get_collision_statistics(self) -> Dict[str, Any]:
        return {
            "total_collisions": self.total_collisions,
            "kept_in_history": len(self.collision_history),
            "kind_distribution": {kind.value: count for kind, count in self.collision_stats.items()},
        }

    def reset(self) -> None:
        self.collision_history.clear()
        self.total_collisions = 0
        for kind in self.collision_stats:
            self.collision_stats[kind] = 0


def _distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


class CollisionResolver:
    """Applies the effect of every player contact, in a fixed order"""

    def __init__(self, reporter: Optional[CollisionReporter] = None):
        self.reporter = reporter or CollisionReporter()

    def resolve(self,
                store: EntityStore,
                state: RunState,
                events: EventLog,
                map_config: MapConfig,
                speed: float,
                dt: float,
                rng) -> ResolveOutcome:
        """
        Resolve every contact of this tick.

        Order is obstacles, hazard zones, pickups, traffic, pursuit agents.
        Resolution stops as soon as the last life is lost.

        Args:
            store: Entities of the run, mutated in place
            state: Run state, mutated in place
            events: Event log receiving UI messages
            map_config: Active map, used to pick a respawn point
            speed: Player speed used for near-miss checks
            dt: Tick length in seconds
            rng: numpy random Generator

        Returns:
            ResolveOutcome telling the engine whether the run ended
        """
        self._resolve_obstacles(store, state, events)
        self._resolve_hazards(store, state, dt)
        self._resolve_pickups(store, state, events, dt)
        self._resolve_traffic(store, state, events, speed)
        return self._resolve_agents(store, state, events, map_config, speed, rng)

    def _report(self, kind: CollisionKind, player: Vehicle, state: RunState) -> None:
        event = self.reporter.report(kind, (player.x, player.y), state.elapsed)
        logger.debug(f"{event}")

    def _resolve_obstacles(self, store: EntityStore, state: RunState, events: EventLog) -> None:
        player = store.player
        for obstacle in store.obstacles:
            dx = player.x - obstacle.x
            dy = player.y - obstacle.y
            if math.hypot(dx, dy) >= obstacle.radius + PLAYER_RADIUS:
                continue
            normal = math.atan2(dy, dx)
            player.vx += math.cos(normal) * OBSTACLE_BUMP_IMPULSE
            player.vy += math.sin(normal) * OBSTACLE_BUMP_IMPULSE
            state.bump_shake(OBSTACLE_SHAKE)
            state.combo -= OBSTACLE_COMBO_PENALTY
            state.score -= OBSTACLE_SCORE_PENALTY
            self._report(CollisionKind.OBSTACLE, player, state)
            announce(state, events, "Hit obstacle! Combo reduced.")

    def _resolve_hazards(self, store: EntityStore, state: RunState, dt: float) -> None:
        player = store.player
        for zone in store.hazard_zones:
            if _distance(player, zone) < zone.radius + HAZARD_CONTACT_MARGIN:
                player.vx *= HAZARD_VELOCITY_DAMPING
                player.vy *= HAZARD_VELOCITY_DAMPING
                state.score -= dt * HAZARD_SCORE_BLEED
                state.combo -= dt * HAZARD_COMBO_BLEED

    def _resolve_pickups(self, store: EntityStore, state: RunState, events: EventLog, dt: float) -> None:
        player = store.player
        for pickup in store.pickups:
            if not pickup.active:
                continue
            pickup.phase += dt * PICKUP_PHASE_RATE
            if _distance(player, pickup) >= PICKUP_RADIUS:
                continue

            pickup.consume()
            if pickup.type is PickupType.BOOST:
                player.boost += PICKUP_BOOST_AMOUNT
                state.score += PICKUP_BOOST_SCORE
                text = f"Boost canister +{PICKUP_BOOST_AMOUNT:.0f}"
            elif pickup.type is PickupType.SCORE:
                state.score += PICKUP_SCORE_AMOUNT
                state.combo += PICKUP_SCORE_COMBO
                text = f"Data cache +{PICKUP_SCORE_AMOUNT:.0f}"
            elif pickup.type is PickupType.SHIELD:
                player.shield = min(SHIELD_MAX, player.shield + PICKUP_SHIELD_AMOUNT)
                text = f"Shield battery +{PICKUP_SHIELD_AMOUNT}s"
            else:
                player.pulse_charge += PICKUP_PULSE_AMOUNT
                text = f"Pulse cell +{PICKUP_PULSE_AMOUNT:.0f}"

            if isinstance(state.objective, CollectPickups):
                state.objective = state.objective.consume_pickup()
            self._report(CollisionKind.PICKUP, player, state)
            announce(state, events, text)

    def _resolve_traffic(self, store: EntityStore, state: RunState, events: EventLog, speed: float) -> None:
        player = store.player
        for vehicle in store.traffic:
            distance = _distance(player, vehicle)
            if distance >= vehicle.tuning.contact_radius:
                self.check_near_miss(state, player, distance, speed)
                continue

            if player.shield > 0:
                player.shield -= TRAFFIC_SHIELD_COST
                state.score += TRAFFIC_SHIELD_SCORE
                self._report(CollisionKind.TRAFFIC_SHIELDED, player, state)
            else:
                player.vx *= TRAFFIC_VELOCITY_DAMPING
                player.vy *= TRAFFIC_VELOCITY_DAMPING
                state.combo -= TRAFFIC_COMBO_PENALTY
                state.score -= TRAFFIC_SCORE_PENALTY
                self._report(CollisionKind.TRAFFIC, player, state)
            state.bump_shake(TRAFFIC_SHAKE)
            announce(state, events, "Traffic collision!")

    def _resolve_agents(self,
                        store: EntityStore,
                        state: RunState,
                        events: EventLog,
                        map_config: MapConfig,
                        speed: float,
                        rng) -> ResolveOutcome:
        player = store.player
        outcome = ResolveOutcome.NONE
        for agent in store.agents:
            distance = max(MIN_DISTANCE, _distance(player, agent))
            if distance >= AGENT_CONTACT_RADIUS:
                self.check_near_miss(state, player, distance, speed)
                continue

            if player.shield > 0:
                player.shield -= AGENT_SHIELD_COST
                agent.vx *= AGENT_SHIELD_REPEL
                agent.vy *= AGENT_SHIELD_REPEL
                state.score += AGENT_SHIELD_SCORE
                self._report(CollisionKind.AGENT_BLOCKED, player, state)
                announce(state, events, "Shield impact blocked")
                continue

            state.lives -= 1
            self._report(CollisionKind.LIFE_LOST, player, state)
            announce(state, events, f"Busted! Lives left: {state.lives}")
            if state.lives <= 0:
                logger.info(f"Last life lost at t={state.elapsed:.1f}s with score {state.score:.0f}")
                return ResolveOutcome.RUN_ENDED
            respawn_player(player, state, map_config, rng)
            outcome = ResolveOutcome.RESPAWNED
        return outcome

    def check_near_miss(self, state: RunState, player: Vehicle, distance: float, speed: float) -> bool:
        """
        Award a near-miss bonus when the pass was close and fast enough.

        A single cooldown in simulation time is shared by traffic and agents.

        Returns:
            True if the bonus was awarded
        """
        if distance >= NEAR_MISS_DISTANCE or speed <= NEAR_MISS_SPEED:
            return False
        if state.elapsed - state.last_near_miss < NEAR_MISS_COOLDOWN:
            return False
        state.last_near_miss = state.elapsed
        state.combo += NEAR_MISS_COMBO
        state.score += NEAR_MISS_SCORE
        self._report(CollisionKind.NEAR_MISS, player, state)
        return True

    def reset(self) -> None:
        self.reporter.reset()


def respawn_player(player: Vehicle, state: RunState, map_config: MapConfig, rng) -> None:
    """Put the player back on a spawn point with a short protective shield"""
    player.place(pick_spawn_point(map_config, rng))
    player.shield = RESPAWN_SHIELD
    player.pulse_charge += RESPAWN_PULSE_BONUS
    state.bump_shake(RESPAWN_SHAKE)
