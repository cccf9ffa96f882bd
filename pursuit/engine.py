"""
Chase simulation engine.

ChaseEngine owns the run state and the entity store and advances them
through a single mutating entry point, tick(). Everything else (renderer,
gym environment, demos) reads a snapshot after tick() returns.
"""

import logging
import math
import numpy as np
from typing import Any, Dict, List, Optional
from .config_set import (
    GameData,
    find_weather,
    find_difficulty,
    pick_spawn_point,
    select_config,
)
from .entities import EntityStore
from .run_state import RunState, EventLog, EventMessage, announce
from .vehicle_physics import ControlIntent, NO_INPUT, integrate_vehicle, update_traffic, age_hazard_zones
from .pursuit_steering import steer_agents
from .collision import CollisionResolver, ResolveOutcome
from .economy import update_economy
from .progression import (
    advance_objective,
    check_wave_escalation,
    spawn_hazard_burst,
    wave_triggers_hazard_burst,
)
from .score_store import ScoreStore, InMemoryScoreStore, score_key
from .constants import (
    MAX_TICK_DT,
    STORM_BURST_RATE,
    PULSE_COST,
    PULSE_RADIUS,
    PULSE_STUN_TIME,
    PULSE_VELOCITY_FACTOR,
    PULSE_SCORE_PER_AGENT,
    PULSE_FLASH,
    PULSE_SHAKE,
    PAUSE_MESSAGE_DURATION,
    FLASH_DECAY_RATE,
    SHAKE_DECAY_PER_TICK,
    LIGHTNING_FLASH_CHANCE,
    LIGHTNING_FLASH,
    DEFAULT_DIFFICULTY_ID,
    DEFAULT_WEATHER_ID,
    CONTACT_MARKER_TIME,
)

# Setup module logger
logger = logging.getLogger(__name__)


class ChaseEngine:
    """Real-time chase simulation with objectives and wave escalation"""

    def __init__(self,
                 game_data: GameData,
                 score_store: Optional[ScoreStore] = None,
                 map_id: Optional[str] = None,
                 mode_id: Optional[str] = None,
                 weather_id: str = DEFAULT_WEATHER_ID,
                 difficulty_id: str = DEFAULT_DIFFICULTY_ID,
                 seed: Optional[int] = None):
        """
        Initialize chase engine and start the first run.

        Args:
            game_data: Map and mode libraries
            score_store: Best-score persistence, in-memory when None
            map_id: Map to start on (first map if None)
            mode_id: Game mode (first mode if None)
            weather_id: Weather mode id, unknown ids fall back to clear
            difficulty_id: Difficulty id, unknown ids fall back to driver
            seed: Seed for the random generator

        Raises:
            ConfigError: If the map or mode library is empty or an id is unknown
        """
        game_data.validate()
        self.game_data = game_data
        self.score_store = score_store or InMemoryScoreStore()
        self.map = select_config(game_data.maps, map_id)
        self.mode = select_config(game_data.modes, mode_id)
        self.weather = find_weather(weather_id)
        self.difficulty = find_difficulty(difficulty_id)

        self.rng = np.random.default_rng(seed)
        self.events = EventLog()
        self.resolver = CollisionResolver()

        # Statistics across runs
        self.runs_started = 0
        self.runs_ended = 0
        self.lives_lost = 0

        self.reset()

    @property
    def score_key(self) -> str:
        return score_key(self.map.id, self.mode.id, self.difficulty.id)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Start a new run on the current selection.

        Builds a fresh RunState and EntityStore, so no partially reset
        state is ever observable.
        """
        if seed is not None:
            self.rng = np.random.default_rng(seed)

        stored_best = self.score_store.get(self.score_key)
        state = RunState(lives=self.difficulty.lives, best_score=stored_best or 0.0)
        spawn = pick_spawn_point(self.map, self.rng)
        store = EntityStore.populate(self.map, self.mode, spawn, self.rng)

        self.state = state
        self.store = store
        self.resolver.reset()
        self.runs_started += 1
        logger.info(f"Run started on {self.map.id}/{self.mode.id} "
                    f"({self.difficulty.id}, {self.weather.id}) with {len(store.agents)} chasers")
        announce(self.state, self.events, "Run started. Build combo with near misses + objectives.")

    def tick(self, dt: float, intent: Optional[ControlIntent] = None) -> None:
        """
        Advance the simulation by one frame.

        Triggers carried by the intent are handled first, in a fixed order:
        pause toggle (also while paused), restart, map cycle, energy pulse.
        A restart or map cycle ends the tick on the fresh run. A zero dt
        handles triggers only, so repeated tick(0) never resolves contacts
        again.

        Args:
            dt: Elapsed seconds since the previous tick, clamped to [0, MAX_TICK_DT]
            intent: Driver input for this tick, no input when None
        """
        intent = intent or NO_INPUT
        if intent.toggle_pause:
            self._toggle_pause()
        if self.state.paused:
            return
        if intent.restart:
            self._restart()
            return
        if intent.cycle_map:
            self._cycle_map()
            return
        if intent.fire_pulse:
            self._fire_energy_pulse()

        dt = max(0.0, min(MAX_TICK_DT, dt))
        if dt == 0.0:
            return
        state = self.state
        store = self.store
        player = store.player
        state.elapsed += dt

        # Movement
        integrate_vehicle(player, intent, self.mode, self.weather, self.map, dt)
        update_traffic(store.traffic, self.map, dt, self.rng)
        store.hazard_zones = age_hazard_zones(store.hazard_zones, dt)
        if self.weather.lightning and self.rng.random() < dt * STORM_BURST_RATE:
            self._spawn_hazard_burst()
        distances = steer_agents(store.agents, player, state.heat, self.mode,
                                 self.weather, self.difficulty, self.map, dt)

        # Contacts
        speed = player.speed
        player.shield -= dt
        lives_before = state.lives
        outcome = self.resolver.resolve(store, state, self.events, self.map, speed, dt, self.rng)
        self.lives_lost += max(0, lives_before - state.lives)
        if outcome is ResolveOutcome.RUN_ENDED:
            self._end_run()
            return

        # Economy and progression
        update_economy(state, distances, speed, self.difficulty, dt)
        self._advance_objective(dt)
        self._check_waves()
        state.best_score = max(state.best_score, state.score)

        self._update_cosmetics(dt)

    def _advance_objective(self, dt: float) -> None:
        state = self.state
        objective, completion = advance_objective(state.objective, state.heat, dt, float(self.rng.random()))
        state.objective = objective
        if completion is not None:
            state.score += completion.bonus
            logger.debug(f"Objective completed (+{completion.bonus:.0f}), next: {objective.describe()}")
            announce(state, self.events, completion.message)

    def _check_waves(self) -> None:
        state = self.state
        reinforcements = check_wave_escalation(state)
        if reinforcements == 0:
            return
        player = self.store.player
        for _ in range(reinforcements):
            self.store.spawn_agent(player.x, player.y)
        if wave_triggers_hazard_burst(state.wave):
            self._spawn_hazard_burst()
        announce(state, self.events, f"Wave {state.wave}! Reinforcements inbound.")

    def _spawn_hazard_burst(self) -> None:
        player = self.store.player
        spawn_hazard_burst(self.store.hazard_zones, player.x, player.y, self.rng)
        announce(self.state, self.events, "Hazard burst ahead!")

    def _update_cosmetics(self, dt: float) -> None:
        state = self.state
        state.update_message_timer(dt)
        if self.weather.lightning and self.rng.random() < LIGHTNING_FLASH_CHANCE:
            state.flash = max(state.flash, LIGHTNING_FLASH)
        state.flash = max(0.0, state.flash - dt * FLASH_DECAY_RATE)
        state.shake = max(0.0, state.shake - SHAKE_DECAY_PER_TICK)

    def _end_run(self) -> None:
        self.runs_ended += 1
        logger.info(f"Run ended after {self.state.elapsed:.1f}s, wave {self.state.wave}, "
                    f"score {self.state.score:.0f}")
        self.save_best_score()
        self.reset()
        announce(self.state, self.events, "Run ended. Restarted.")

    def _fire_energy_pulse(self) -> int:
        """
        Stun every pursuit agent near the player.

        Returns:
            Number of agents stunned, 0 when the charge was too low
        """
        state = self.state
        player = self.store.player
        if player.pulse_charge < PULSE_COST:
            announce(state, self.events, "Pulse charge low. Collect pulse cells.")
            return 0

        player.pulse_charge -= PULSE_COST
        state.flash = PULSE_FLASH
        state.bump_shake(PULSE_SHAKE)
        stunned = 0
        for agent in self.store.agents:
            if math.hypot(player.x - agent.x, player.y - agent.y) < PULSE_RADIUS:
                agent.stun = max(agent.stun, PULSE_STUN_TIME)
                agent.vx *= PULSE_VELOCITY_FACTOR
                agent.vy *= PULSE_VELOCITY_FACTOR
                stunned += 1
        state.score += stunned * PULSE_SCORE_PER_AGENT
        state.best_score = max(state.best_score, state.score)
        announce(state, self.events, f"Energy pulse! Disabled {stunned} chasers.")
        return stunned

    def _toggle_pause(self) -> bool:
        state = self.state
        state.paused = not state.paused
        announce(state, self.events, "Paused" if state.paused else "Resumed", PAUSE_MESSAGE_DURATION)
        return state.paused

    def _restart(self) -> None:
        """Abandon the current run and start a new one, keeping its best score"""
        self.save_best_score()
        self.reset()

    def _cycle_map(self) -> None:
        """Switch to the next map in the library and restart"""
        maps = self.game_data.maps
        index = maps.index(self.map)
        self.select(map_id=maps[(index + 1) % len(maps)].id)

    def select(self,
               map_id: Optional[str] = None,
               mode_id: Optional[str] = None,
               difficulty_id: Optional[str] = None) -> None:
        """Change map, mode or difficulty; any change starts a new run"""
        self.save_best_score()
        if map_id is not None:
            self.map = select_config(self.game_data.maps, map_id)
            logger.info(f"Map changed to {self.map.id}")
        if mode_id is not None:
            self.mode = select_config(self.game_data.modes, mode_id)
        if difficulty_id is not None:
            self.difficulty = find_difficulty(difficulty_id)
        self.reset()

    def set_weather(self, weather_id: str) -> None:
        """Change weather for the running run, without a restart"""
        self.weather = find_weather(weather_id)
        logger.debug(f"Weather set to {self.weather.id}")

    def save_best_score(self) -> bool:
        """
        Persist the best score of this run if it beats the stored one.

        Returns:
            True if a new best score was written
        """
        best = math.floor(max(self.state.best_score, self.state.score))
        stored = self.score_store.get(self.score_key)
        if stored is not None and best <= stored:
            return False
        if best <= 0:
            return False
        self.score_store.set(self.score_key, float(best))
        logger.debug(f"Best score {best} saved under {self.score_key}")
        return True

    def drain_events(self) -> List[EventMessage]:
        return self.events.drain()

    def get_snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the run for renderers and observers"""
        state = self.state
        store = self.store
        player = store.player
        return {
            "map_id": self.map.id,
            "mode_id": self.mode.id,
            "weather_id": self.weather.id,
            "visibility": self.weather.visibility,
            "particles": self.weather.particles,
            "difficulty_id": self.difficulty.id,
            "elapsed": state.elapsed,
            "score": state.score,
            "best_score": state.best_score,
            "combo": state.combo,
            "heat": state.heat,
            "lives": state.lives,
            "wave": state.wave,
            "objective": state.objective.describe(),
            "message": state.current_message,
            "paused": state.paused,
            "shake": state.shake,
            "flash": state.flash,
            "player": {
                "x": player.x,
                "y": player.y,
                "vx": player.vx,
                "vy": player.vy,
                "heading": player.heading,
                "speed": player.speed,
                "boost": player.boost,
                "pulse_charge": player.pulse_charge,
                "shield": player.shield,
            },
            "agents": [
                {"x": a.x, "y": a.y, "heading": a.heading, "kind": a.kind.value, "stun": a.stun}
                for a in store.agents
            ],
            "traffic": [
                {"x": t.x, "y": t.y, "heading": t.heading, "kind": t.kind.value}
                for t in store.traffic
            ],
            "obstacles": [
                {"x": o.x, "y": o.y, "radius": o.radius, "hue": o.hue, "rotation": o.rotation}
                for o in store.obstacles
            ],
            "pickups": [
                {"x": p.x, "y": p.y, "type": p.type.value, "phase": p.phase}
                for p in store.active_pickups()
            ],
            "hazard_zones": [
                {"x": z.x, "y": z.y, "radius": z.radius, "ttl": z.ttl}
                for z in store.hazard_zones
            ],
            "recent_contacts": [
                {"x": c.position[0], "y": c.position[1], "kind": c.kind.value, "timestamp": c.timestamp}
                for c in self.resolver.reporter.get_recent_collisions(state.elapsed, CONTACT_MARKER_TIME)
            ],
        }

    def close(self) -> None:
        self.save_best_score()
        self.score_store.close()

    def __str__(self) -> str:
        state = self.state
        return (f"ChaseEngine({self.map.id}/{self.mode.id}, score={state.score:.0f}, "
                f"combo={state.combo:.1f}x, heat={state.heat:.0f}%, lives={state.lives}, wave={state.wave})")
