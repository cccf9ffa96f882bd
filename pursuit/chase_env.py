"""
Gymnasium environment around the chase engine.

The agent drives the player vehicle with a discrete action table and is
rewarded for score gained, penalized for lives lost. An episode ends when
the run ends (last life lost) or is truncated after a fixed simulated time.
"""

import logging
import math
import numpy as np
import gymnasium as gym
import pygame
from gymnasium import spaces
from typing import Optional, Tuple, Dict, Any
from .config_set import GameData, load_game_data
from .engine import ChaseEngine
from .renderer import Renderer
from .score_store import ScoreStore
from .vehicle_physics import ControlIntent
from .constants import (
    DEFAULT_TICK_DT,
    DEFAULT_WINDOW_SIZE,
    DEFAULT_RENDER_FPS,
    DEFAULT_GAME_DATA_FILE,
    DEFAULT_DIFFICULTY_ID,
    DEFAULT_WEATHER_ID,
    RENDER_MODE_HUMAN,
    METER_MAX,
    HEAT_MAX,
    COMBO_MIN,
    COMBO_MAX,
    ENV_TIME_LIMIT,
    ENV_NEAREST_AGENTS,
    ENV_REWARD_SCORE_SCALE,
    ENV_LIFE_LOST_PENALTY,
    ENV_OBSERVATION_SIZE,
    NORM_MAX_SPEED,
    NORM_MAX_DISTANCE,
    NORM_MAX_SHIELD,
)

# Setup module logger
logger = logging.getLogger(__name__)

# Discrete action table
ACTION_TABLE = (
    ControlIntent(),  # 0: coast
    ControlIntent(throttle=True),  # 1: accelerate
    ControlIntent(throttle=True, steer=-1),  # 2: accelerate left
    ControlIntent(throttle=True, steer=1),  # 3: accelerate right
    ControlIntent(brake=True),  # 4: brake
    ControlIntent(reverse=True),  # 5: reverse
    ControlIntent(throttle=True, boost=True),  # 6: boost
    ControlIntent(throttle=True, fire_pulse=True),  # 7: accelerate and fire pulse
)


class ChaseEnv(gym.Env):
    """Chase simulation as a discrete-action reinforcement learning environment"""
    metadata = {"render_modes": [RENDER_MODE_HUMAN], "render_fps": DEFAULT_RENDER_FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 game_data: Optional[GameData] = None,
                 game_data_file: str = DEFAULT_GAME_DATA_FILE,
                 map_id: Optional[str] = None,
                 mode_id: Optional[str] = None,
                 weather_id: str = DEFAULT_WEATHER_ID,
                 difficulty_id: str = DEFAULT_DIFFICULTY_ID,
                 score_store: Optional[ScoreStore] = None,
                 tick_dt: float = DEFAULT_TICK_DT,
                 time_limit: float = ENV_TIME_LIMIT):
        """
        Initialize chase environment.

        Args:
            render_mode: Rendering mode ("human" or None)
            game_data: Preloaded map and mode libraries, read from game_data_file when None
            game_data_file: Path to the game data JSON file
            map_id: Map to play on (first map if None)
            mode_id: Game mode (first mode if None)
            weather_id: Weather mode id
            difficulty_id: Difficulty id
            score_store: Best-score persistence, in-memory when None
            tick_dt: Simulated seconds per step
            time_limit: Simulated seconds before the episode is truncated
        """
        super().__init__()
        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render mode: {render_mode}")

        self.render_mode = render_mode
        self.tick_dt = tick_dt
        self.time_limit = time_limit

        if game_data is None:
            game_data = load_game_data(game_data_file)
        self.engine = ChaseEngine(game_data, score_store=score_store, map_id=map_id, mode_id=mode_id,
                                  weather_id=weather_id, difficulty_id=difficulty_id)

        self.action_space = spaces.Discrete(len(ACTION_TABLE))
        self.observation_space = spaces.Box(
            low=-1.0,
            high=1.0,
            shape=(ENV_OBSERVATION_SIZE,),
            dtype=np.float32
        )

        self.renderer = None
        if render_mode == RENDER_MODE_HUMAN:
            self.renderer = Renderer(
                window_size=DEFAULT_WINDOW_SIZE,
                render_fps=self.metadata["render_fps"],
                map_config=self.engine.map,
            )

        self.last_action = 0
        self._cumulative_reward = 0.0

        logger.info(f"ChaseEnv initialized on map {self.engine.map.id} with mode {self.engine.mode.id}")

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset environment to a fresh run.

        Args:
            seed: Random seed (optional)
            options: Additional options (optional)

        Returns:
            Tuple of (observation, info)
        """
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(2 ** 31))
        # A truncated episode never reaches the engine's own run end
        self.engine.save_best_score()
        self.engine.reset(seed=seed)
        self.engine.drain_events()

        self.last_action = 0
        self._cumulative_reward = 0.0

        logger.debug("Environment reset complete")
        return self._get_obs(), self._get_info()

    def step(self, action):
        """
        Execute one environment step.

        Args:
            action: Index into the discrete action table

        Returns:
            (observation, reward, terminated, truncated, info)
        """
        intent = self._discrete_to_intent(action)
        self.last_action = int(action)

        engine = self.engine
        score_before = engine.state.score
        lives_lost_before = engine.lives_lost
        runs_ended_before = engine.runs_ended

        engine.tick(self.tick_dt, intent)
        engine.drain_events()

        terminated = engine.runs_ended > runs_ended_before
        lives_lost = engine.lives_lost - lives_lost_before

        # The engine restarts on its own when the run ends, the new score is not a gain
        score_gain = 0.0 if terminated else engine.state.score - score_before
        reward = score_gain * ENV_REWARD_SCORE_SCALE - lives_lost * ENV_LIFE_LOST_PENALTY
        self._cumulative_reward += reward

        truncated = not terminated and engine.state.elapsed >= self.time_limit

        return self._get_obs(), float(reward), terminated, truncated, self._get_info()

    def _discrete_to_intent(self, action) -> ControlIntent:
        """Convert a discrete action to a control intent.

        Args:
            action: Discrete action (0-7)

        Returns:
            Control intent for the next tick
        """
        index = int(action)
        if index < 0 or index >= len(ACTION_TABLE):
            raise ValueError(f"Invalid discrete action: {action}")
        return ACTION_TABLE[index]

    def _get_obs(self) -> np.ndarray:
        # Normalized observation vector, every entry in [-1, 1]
        # [pos_x, pos_y, vel_x, vel_y, speed, sin_heading, cos_heading,
        #  boost, pulse_charge, shield, heat, combo, lives,
        #  nearest_pickup_distance, nearest_obstacle_clearance,
        #  agent_0_dx, agent_0_dy, ..., agent_2_dx, agent_2_dy]
        engine = self.engine
        state = engine.state
        store = engine.store
        player = store.player

        pickup_distance = min(
            (math.hypot(p.x - player.x, p.y - player.y) for p in store.active_pickups()),
            default=NORM_MAX_DISTANCE
        )
        obstacle_clearance = min(
            (math.hypot(o.x - player.x, o.y - player.y) - o.radius for o in store.obstacles),
            default=NORM_MAX_DISTANCE
        )

        values = [
            player.x / engine.map.half_width,
            player.y / engine.map.half_height,
            player.vx / NORM_MAX_SPEED,
            player.vy / NORM_MAX_SPEED,
            player.speed / NORM_MAX_SPEED,
            math.sin(player.heading),
            math.cos(player.heading),
            player.boost / METER_MAX,
            player.pulse_charge / METER_MAX,
            player.shield / NORM_MAX_SHIELD,
            state.heat / HEAT_MAX,
            (state.combo - COMBO_MIN) / (COMBO_MAX - COMBO_MIN),
            state.lives / max(1, engine.difficulty.lives),
            pickup_distance / NORM_MAX_DISTANCE,
            obstacle_clearance / NORM_MAX_DISTANCE,
        ]

        # Nearest agents first, missing slots read as far away
        nearest = sorted(store.agents, key=lambda a: math.hypot(a.x - player.x, a.y - player.y))
        for i in range(ENV_NEAREST_AGENTS):
            if i < len(nearest):
                values.append((nearest[i].x - player.x) / NORM_MAX_DISTANCE)
                values.append((nearest[i].y - player.y) / NORM_MAX_DISTANCE)
            else:
                values.extend((1.0, 1.0))

        return np.clip(np.array(values, dtype=np.float32), -1.0, 1.0)

    def _get_info(self) -> Dict[str, Any]:
        engine = self.engine
        state = engine.state
        return {
            "elapsed_time": state.elapsed,
            "score": state.score,
            "best_score": state.best_score,
            "combo": state.combo,
            "heat": state.heat,
            "lives": state.lives,
            "wave": state.wave,
            "objective": state.objective.describe(),
            "agents": len(engine.store.agents),
            "runs_ended": engine.runs_ended,
            "collisions": engine.resolver.reporter.get_collision_statistics(),
            "last_action": self.last_action,
            "cumulative_reward": self._cumulative_reward,
        }

    def check_quit_requested(self) -> bool:
        """Check if user has requested to quit (e.g., by clicking window close button)"""
        if self.render_mode != RENDER_MODE_HUMAN or not pygame.get_init():
            return False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return True
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return True
        return False

    def render(self) -> None:
        """Render the environment"""
        if self.render_mode == RENDER_MODE_HUMAN and self.renderer:
            self.renderer.set_map(self.engine.map)
            self.renderer.render_frame(self.engine.get_snapshot())

    def close(self) -> None:
        """Clean up environment resources"""
        if self.renderer:
            self.renderer.close()
        self.engine.close()
        logger.info("ChaseEnv closed")
