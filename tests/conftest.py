import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pursuit.config_set import (
    GameData,
    MapConfig,
    ModeConfig,
    SpawnPoint,
    find_weather,
    find_difficulty,
)


TEST_MAP = MapConfig(
    id="test-grid",
    name="Test Grid",
    half_width=1000.0,
    half_height=800.0,
    spawn_points=(SpawnPoint(0.0, 0.0, 0.0),),
)

SECOND_MAP = MapConfig(
    id="test-loop",
    name="Test Loop",
    half_width=1500.0,
    half_height=900.0,
    spawn_points=(SpawnPoint(-300.0, 200.0, 1.0),),
)

TEST_MODE = ModeConfig(
    id="arcade",
    name="Arcade",
    acceleration=420.0,
    reverse_acceleration=260.0,
    turn_speed=9.5,
    friction=0.985,
    brake_friction=0.94,
    max_speed=360.0,
    chaser_accel=300.0,
    chaser_friction=0.985,
    chaser_max_speed=300.0,
    chaser_count=4,
)


@pytest.fixture
def map_config():
    return TEST_MAP


@pytest.fixture
def mode():
    return TEST_MODE


@pytest.fixture
def clear_weather():
    return find_weather("clear")


@pytest.fixture
def difficulty():
    return find_difficulty("driver")


@pytest.fixture
def game_data():
    return GameData(maps=[TEST_MAP, SECOND_MAP], modes=[TEST_MODE])
