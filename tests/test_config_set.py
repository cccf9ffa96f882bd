import json
import os

import numpy as np
import pytest

from pursuit.config_set import (
    ConfigError,
    GameDataLoader,
    find_weather,
    find_difficulty,
    load_game_data,
    pick_spawn_point,
    select_config,
)

GAME_DATA_FILE = os.path.join(os.path.dirname(__file__), "..", "maps", "game_data.json")


def _raw_map(**overrides):
    entry = {"id": "tiny", "half_width": 800, "half_height": 600}
    entry.update(overrides)
    return entry


def _raw_mode(**overrides):
    entry = {
        "id": "arcade",
        "acceleration": 420,
        "reverse_acceleration": 260,
        "turn_speed": 9.5,
        "friction": 0.985,
        "brake_friction": 0.94,
        "max_speed": 360,
        "chaser_accel": 300,
        "chaser_friction": 0.985,
        "chaser_max_speed": 300,
        "chaser_count": 4,
    }
    entry.update(overrides)
    return entry


def test_bundled_game_data_loads():
    data = load_game_data(GAME_DATA_FILE)

    assert [m.id for m in data.maps] == ["neon-grid", "harbor-loop", "desert-sprawl"]
    assert {m.id for m in data.modes} == {"arcade", "sim", "mayhem"}
    assert all(m.spawn_points for m in data.maps)


def test_missing_file_is_a_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_game_data(str(tmp_path / "missing.json"))


def test_invalid_json_is_a_config_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{maps: ")

    with pytest.raises(ConfigError):
        load_game_data(str(path))


def test_empty_library_is_a_config_error(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"maps": [], "modes": [_raw_mode()]}))

    with pytest.raises(ConfigError):
        load_game_data(str(path))


def test_map_defaults_are_filled_in():
    data = GameDataLoader().parse({"maps": [_raw_map()], "modes": [_raw_mode()]})

    map_config = data.maps[0]
    assert map_config.name == "tiny"
    assert map_config.grid == 120.0
    assert map_config.spawn_points == ()


def test_missing_mode_field_is_a_config_error():
    raw = _raw_mode()
    del raw["max_speed"]

    with pytest.raises(ConfigError):
        GameDataLoader().parse({"maps": [_raw_map()], "modes": [raw]})


def test_too_small_map_is_rejected():
    with pytest.raises(ConfigError):
        GameDataLoader().parse({"maps": [_raw_map(half_width=150)], "modes": []})


def test_select_config_defaults_to_first_entry(game_data):
    assert select_config(game_data.maps, None).id == "test-grid"
    assert select_config(game_data.maps, "test-loop").id == "test-loop"

    with pytest.raises(ConfigError):
        select_config(game_data.maps, "nowhere")
    with pytest.raises(ConfigError):
        select_config([], None)


def test_unknown_weather_and_difficulty_fall_back():
    assert find_weather("hail").id == "clear"
    assert find_weather("storm").lightning
    assert find_difficulty("impossible").id == "driver"
    assert find_difficulty("rookie").lives == 4


def test_spawn_point_without_spawn_list_is_map_centre():
    data = GameDataLoader().parse({"maps": [_raw_map()], "modes": [_raw_mode()]})

    spawn = pick_spawn_point(data.maps[0], np.random.default_rng(0))

    assert (spawn.x, spawn.y, spawn.heading) == (0.0, 0.0, 0.0)
