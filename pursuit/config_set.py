"""
Read-only configuration for a chase run.

Maps and modes come from a JSON game-data file; weather and difficulty
tables are built in. None of these objects are mutated by the engine.
"""

import json
import os
from dataclasses import dataclass, field
from typing import List, Tuple, Optional


class ConfigError(ValueError):
    """Raised when game data is missing, empty or malformed"""


@dataclass(frozen=True)
class SpawnPoint:
    x: float
    y: float
    heading: float = 0.0  # radians


@dataclass(frozen=True)
class DecorTile:
    x: float
    y: float
    size: float
    color: str = "#ffffff"


@dataclass(frozen=True)
class MapConfig:
    id: str
    name: str
    half_width: float
    half_height: float
    grid: float = 120.0
    theme: str = ""
    sky_top: str = "#050816"
    sky_bottom: str = "#140a2a"
    decor: Tuple[DecorTile, ...] = ()
    spawn_points: Tuple[SpawnPoint, ...] = ()


@dataclass(frozen=True)
class ModeConfig:
    id: str
    name: str
    acceleration: float
    reverse_acceleration: float
    turn_speed: float
    friction: float
    brake_friction: float
    max_speed: float
    chaser_accel: float
    chaser_friction: float
    chaser_max_speed: float
    chaser_count: int


@dataclass(frozen=True)
class WeatherConfig:
    id: str
    label: str
    drag: float
    visibility: float
    particles: int
    lightning: bool


@dataclass(frozen=True)
class DifficultyConfig:
    id: str
    label: str
    heat_rate: float
    chaser_scale: float
    score_scale: float
    lives: int


WEATHER_MODES = (
    WeatherConfig("clear", "Clear", drag=1.0, visibility=1.0, particles=0, lightning=False),
    WeatherConfig("rain", "Rain", drag=0.986, visibility=0.87, particles=120, lightning=False),
    WeatherConfig("fog", "Fog", drag=0.992, visibility=0.72, particles=80, lightning=False),
    WeatherConfig("storm", "Storm", drag=0.978, visibility=0.62, particles=180, lightning=True),
    WeatherConfig("night", "Neon Night", drag=0.99, visibility=0.8, particles=50, lightning=False),
)

DIFFICULTY_LEVELS = (
    DifficultyConfig("rookie", "Rookie", heat_rate=0.82, chaser_scale=0.85, score_scale=0.9, lives=4),
    DifficultyConfig("driver", "Driver", heat_rate=1.0, chaser_scale=1.0, score_scale=1.0, lives=3),
    DifficultyConfig("elite", "Elite", heat_rate=1.18, chaser_scale=1.18, score_scale=1.2, lives=3),
    DifficultyConfig("legend", "Legend", heat_rate=1.4, chaser_scale=1.32, score_scale=1.45, lives=2),
)


def find_weather(weather_id: str) -> WeatherConfig:
    """Look up a weather mode, falling back to clear skies"""
    for weather in WEATHER_MODES:
        if weather.id == weather_id:
            return weather
    return WEATHER_MODES[0]


def find_difficulty(difficulty_id: str) -> DifficultyConfig:
    """Look up a difficulty level, falling back to the default driver level"""
    for difficulty in DIFFICULTY_LEVELS:
        if difficulty.id == difficulty_id:
            return difficulty
    return DIFFICULTY_LEVELS[1]


def pick_spawn_point(map_config: MapConfig, rng) -> SpawnPoint:
    """
    Choose where the player (re)appears on a map.

    Args:
        map_config: Map whose spawn points to choose from
        rng: numpy random Generator

    Returns:
        One of the map's spawn points, or the map centre when it has none
    """
    if not map_config.spawn_points:
        return SpawnPoint(0.0, 0.0, 0.0)
    index = int(rng.integers(len(map_config.spawn_points)))
    return map_config.spawn_points[index]


@dataclass
class GameData:
    maps: List[MapConfig] = field(default_factory=list)
    modes: List[ModeConfig] = field(default_factory=list)

    def validate(self) -> None:
        if not self.maps:
            raise ConfigError("Game data contains no maps")
        if not self.modes:
            raise ConfigError("Game data contains no game modes")


class GameDataLoader:
    """Loads map and mode libraries from a JSON file"""

    def load(self, file_path: str) -> GameData:
        if not os.path.exists(file_path):
            raise ConfigError(f"Game data file not found: {file_path}")

        with open(file_path, 'r') as f:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid game data JSON in {file_path}: {e}") from e

        data = self.parse(raw)
        data.validate()
        return data

    def parse(self, raw: dict) -> GameData:
        if not isinstance(raw, dict):
            raise ConfigError("Game data must be a JSON object")
        maps = [self._parse_map(entry) for entry in raw.get("maps", [])]
        modes = [self._parse_mode(entry) for entry in raw.get("modes", [])]
        return GameData(maps=maps, modes=modes)

    def _parse_map(self, entry: dict) -> MapConfig:
        try:
            decor = tuple(
                DecorTile(float(d["x"]), float(d["y"]), float(d["size"]), d.get("color", "#ffffff"))
                for d in entry.get("decor", [])
            )
            spawn_points = tuple(
                SpawnPoint(float(s["x"]), float(s["y"]), float(s.get("heading", 0.0)))
                for s in entry.get("spawn_points", [])
            )
            map_config = MapConfig(
                id=str(entry["id"]),
                name=entry.get("name", entry["id"]),
                half_width=float(entry["half_width"]),
                half_height=float(entry["half_height"]),
                grid=float(entry.get("grid", 120.0)),
                theme=entry.get("theme", ""),
                sky_top=entry.get("sky_top", "#050816"),
                sky_bottom=entry.get("sky_bottom", "#140a2a"),
                decor=decor,
                spawn_points=spawn_points,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid map entry {entry!r}: {e}") from e

        # Spawning inside the inset areas needs some room
        if map_config.half_width <= 200 or map_config.half_height <= 200:
            raise ConfigError(f"Map {map_config.id} is too small: "
                              f"{map_config.half_width}x{map_config.half_height}")
        return map_config

    def _parse_mode(self, entry: dict) -> ModeConfig:
        try:
            return ModeConfig(
                id=str(entry["id"]),
                name=entry.get("name", entry["id"]),
                acceleration=float(entry["acceleration"]),
                reverse_acceleration=float(entry["reverse_acceleration"]),
                turn_speed=float(entry["turn_speed"]),
                friction=float(entry["friction"]),
                brake_friction=float(entry["brake_friction"]),
                max_speed=float(entry["max_speed"]),
                chaser_accel=float(entry["chaser_accel"]),
                chaser_friction=float(entry["chaser_friction"]),
                chaser_max_speed=float(entry["chaser_max_speed"]),
                chaser_count=int(entry["chaser_count"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid mode entry {entry!r}: {e}") from e


def load_game_data(file_path: str) -> GameData:
    """Load and validate a game data file"""
    return GameDataLoader().load(file_path)


def select_config(items, item_id: Optional[str]):
    """Pick a map or mode by id, defaulting to the first entry"""
    if not items:
        raise ConfigError("Cannot select from an empty configuration library")
    if item_id is None:
        return items[0]
    for item in items:
        if item.id == item_id:
            return item
    raise ConfigError(f"Unknown configuration id: {item_id}")
