"""
Run state, objectives and the event log.

RunState holds the bounded score/combo/heat economy and the progression
counters of one run. A restart builds a new RunState instead of resetting
fields one by one.
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import List, Union
from .constants import (
    HEAT_MIN,
    HEAT_MAX,
    COMBO_MIN,
    COMBO_MAX,
    SCORE_MIN,
    INITIAL_SURVIVE_TIME,
    INITIAL_WAVE,
    INITIAL_NEXT_WAVE_HEAT,
    IDLE_MESSAGE,
    DEFAULT_MESSAGE_DURATION,
    MAX_EVENT_MESSAGES,
)


@dataclass(frozen=True)
class Survive:
    remaining: float  # seconds

    def describe(self) -> str:
        return f"Survive {max(0, math.ceil(self.remaining))}s"


@dataclass(frozen=True)
class CollectPickups:
    remaining: int  # pickups still to collect

    def consume_pickup(self) -> "CollectPickups":
        return CollectPickups(self.remaining - 1)

    def describe(self) -> str:
        return f"Collect {max(0, self.remaining)} pickups"


@dataclass(frozen=True)
class ReachHeat:
    target: float  # heat percent

    def describe(self) -> str:
        return f"Reach Heat {math.ceil(self.target)}%"


Objective = Union[Survive, CollectPickups, ReachHeat]


@dataclass(frozen=True)
class EventMessage:
    text: str
    duration: float  # seconds to keep it on screen


class EventLog:
    """
    Ordered log of messages for the UI.

    Consumers are expected to drain() it once per frame or step. A log
    nobody drains keeps only the latest MAX_EVENT_MESSAGES messages.
    """

    def __init__(self, max_messages: int = MAX_EVENT_MESSAGES):
        self._messages = deque(maxlen=max_messages)

    def emit(self, text: str, duration: float = DEFAULT_MESSAGE_DURATION) -> EventMessage:
        message = EventMessage(text, duration)
        self._messages.append(message)
        return message

    def drain(self) -> List[EventMessage]:
        messages = list(self._messages)
        self._messages.clear()
        return messages

    def __len__(self) -> int:
        return len(self._messages)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class RunState:
    """Score economy and progression state of a single run"""

    def __init__(self, lives: int, best_score: float = 0.0):
        self._score = 0.0
        self._combo = COMBO_MIN
        self._heat = HEAT_MIN
        self.lives = lives
        self.wave = INITIAL_WAVE
        self.next_wave_heat = INITIAL_NEXT_WAVE_HEAT
        self.wave_armed = True  # cleared while heat sits at or above next_wave_heat
        self.elapsed = 0.0
        self.objective: Objective = Survive(INITIAL_SURVIVE_TIME)
        self.message_timer = 0.0
        self.current_message = IDLE_MESSAGE
        self.best_score = best_score
        self.last_near_miss = -float('inf')  # simulation time of the last counted near miss
        self.shake = 0.0
        self.flash = 0.0
        self.paused = False

    @property
    def score(self) -> float:
        return self._score

    @score.setter
    def score(self, value: float) -> None:
        self._score = max(SCORE_MIN, value)

    @property
    def combo(self) -> float:
        return self._combo

    @combo.setter
    def combo(self, value: float) -> None:
        self._combo = _clamp(value, COMBO_MIN, COMBO_MAX)

    @property
    def heat(self) -> float:
        return self._heat

    @heat.setter
    def heat(self, value: float) -> None:
        self._heat = _clamp(value, HEAT_MIN, HEAT_MAX)

    def show_message(self, message: EventMessage) -> None:
        self.current_message = message.text
        self.message_timer = message.duration

    def update_message_timer(self, dt: float) -> None:
        """Count the current message down and fall back to the idle text"""
        if self.message_timer > 0:
            self.message_timer -= dt
            if self.message_timer <= 0:
                self.message_timer = 0.0
                self.current_message = IDLE_MESSAGE

    def bump_shake(self, amount: float) -> None:
        self.shake = max(self.shake, amount)


def announce(state: RunState, log: EventLog, text: str,
             duration: float = DEFAULT_MESSAGE_DURATION) -> EventMessage:
    """Emit a message to the log and make it the one currently on screen"""
    message = log.emit(text, duration)
    state.show_message(message)
    return message
