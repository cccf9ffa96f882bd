"""Heat, combo and score accrual."""

from typing import Iterable
from .config_set import DifficultyConfig
from .run_state import RunState
from .constants import (
    PRESSURE_RANGE,
    PRESSURE_PER_UNIT,
    HEAT_GAIN,
    HEAT_DECAY,
    COMBO_PRESSURE_GAIN,
    COMBO_SPEED_THRESHOLD,
    COMBO_SPEED_CEILING,
    COMBO_SPEED_GAIN,
    SCORE_BASE_RATE,
    SCORE_SPEED_COEFFICIENT,
    SCORE_HEAT_COEFFICIENT,
)


def proximity_pressure(distances: Iterable[float]) -> float:
    """Sum of proximity terms; agents beyond PRESSURE_RANGE contribute nothing"""
    return sum(max(0.0, (PRESSURE_RANGE - d) * PRESSURE_PER_UNIT) for d in distances)


def update_heat(state: RunState, pressure: float, difficulty: DifficultyConfig, dt: float) -> None:
    state.heat = state.heat + pressure * dt * HEAT_GAIN * difficulty.heat_rate - dt * HEAT_DECAY


def update_combo(state: RunState, pressure: float, speed: float, dt: float) -> None:
    combo = state.combo + pressure * dt * COMBO_PRESSURE_GAIN
    # Sustained speed builds combo, up to a ceiling below the hard max
    if speed > COMBO_SPEED_THRESHOLD and combo < COMBO_SPEED_CEILING:
        combo += dt * COMBO_SPEED_GAIN
    state.combo = combo


def score_rate(state: RunState, speed: float, difficulty: DifficultyConfig) -> float:
    """Points per second at the current speed, combo and heat"""
    return ((SCORE_BASE_RATE + speed * SCORE_SPEED_COEFFICIENT) * state.combo
            * (1.0 + state.heat * SCORE_HEAT_COEFFICIENT) * difficulty.score_scale)


def accrue_score(state: RunState, speed: float, difficulty: DifficultyConfig, dt: float) -> None:
    state.score += dt * score_rate(state, speed, difficulty)


def update_economy(state: RunState,
                   distances: Iterable[float],
                   speed: float,
                   difficulty: DifficultyConfig,
                   dt: float) -> float:
    """
    Apply one tick of heat, combo and score changes.

    Returns:
        The proximity pressure used for this tick
    """
    pressure = proximity_pressure(distances)
    update_heat(state, pressure, difficulty, dt)
    update_combo(state, pressure, speed, dt)
    accrue_score(state, speed, difficulty, dt)
    return pressure
