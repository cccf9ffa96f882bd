"""
Best-score persistence.

The engine never touches storage itself. It reads and writes best scores
through a ScoreStore, keyed by the map, mode and difficulty of the run.
"""

import json
import logging
import os
from typing import Dict, Optional
from .constants import BEST_SCORE_KEY_PREFIX

logger = logging.getLogger(__name__)


def score_key(map_id: str, mode_id: str, difficulty_id: str) -> str:
    return f"{BEST_SCORE_KEY_PREFIX}-{map_id}-{mode_id}-{difficulty_id}"


class ScoreStore:
    """Get/set contract for best scores"""

    def get(self, key: str) -> Optional[float]:
        raise NotImplementedError

    def set(self, key: str, score: float) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class InMemoryScoreStore(ScoreStore):
    """Keeps scores for the lifetime of the process, used by headless runs and tests"""

    def __init__(self, initial: Optional[Dict[str, float]] = None):
        self._scores: Dict[str, float] = dict(initial or {})

    def get(self, key: str) -> Optional[float]:
        return self._scores.get(key)

    def set(self, key: str, score: float) -> None:
        self._scores[key] = score


class JsonScoreStore(ScoreStore):
    """
    Scores stored as a flat JSON object in a file.

    A missing or unreadable file is treated as empty so a corrupt save
    never prevents a run from starting.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._scores: Dict[str, float] = self._read()

    def _read(self) -> Dict[str, float]:
        if not os.path.exists(self.file_path):
            return {}
        try:
            with open(self.file_path, 'r') as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read best scores from {self.file_path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring best score file {self.file_path}: not a JSON object")
            return {}
        return {str(k): float(v) for k, v in raw.items() if isinstance(v, (int, float))}

    def get(self, key: str) -> Optional[float]:
        return self._scores.get(key)

    def set(self, key: str, score: float) -> None:
        self._scores[key] = score
        self._write()

    def _write(self) -> None:
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.file_path, 'w') as f:
            json.dump(self._scores, f, indent=2, sort_keys=True)
