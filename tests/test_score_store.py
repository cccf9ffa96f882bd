import json
import logging

from pursuit.score_store import InMemoryScoreStore, JsonScoreStore, score_key


def test_score_key_combines_the_selection():
    assert score_key("neon-grid", "arcade", "elite") == "pursuit-best-neon-grid-arcade-elite"


def test_in_memory_store():
    store = InMemoryScoreStore({"a": 10.0})

    assert store.get("a") == 10.0
    assert store.get("b") is None
    store.set("b", 25.0)
    assert store.get("b") == 25.0


def test_json_store_persists_between_instances(tmp_path):
    path = tmp_path / "saves" / "best.json"

    JsonScoreStore(str(path)).set("pursuit-best-x", 4200.0)

    assert json.loads(path.read_text()) == {"pursuit-best-x": 4200.0}
    assert JsonScoreStore(str(path)).get("pursuit-best-x") == 4200.0


def test_corrupt_json_store_starts_empty(tmp_path, caplog):
    path = tmp_path / "best.json"
    path.write_text("not json")

    with caplog.at_level(logging.WARNING):
        store = JsonScoreStore(str(path))

    assert store.get("anything") is None
    assert "Failed to read best scores" in caplog.text


def test_non_object_json_store_is_ignored(tmp_path):
    path = tmp_path / "best.json"
    path.write_text("[1, 2, 3]")

    assert JsonScoreStore(str(path)).get("1") is None
