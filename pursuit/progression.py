"""
Objective cycle and wave escalation.

Objectives form a cyclic three-state machine with no terminal state:
Survive -> (CollectPickups | ReachHeat) -> Survive -> ...
Waves are a separate one-way ratchet driven by heat.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from .entities import HazardZone
from .run_state import RunState, Objective, Survive, CollectPickups, ReachHeat
from .constants import (
    SURVIVE_BONUS,
    SURVIVE_TO_COLLECT_PROBABILITY,
    COLLECT_PICKUP_COUNT,
    COLLECT_BONUS,
    COLLECT_FOLLOW_SURVIVE_TIME,
    REACH_HEAT_TARGET,
    REACH_HEAT_BONUS,
    REACH_HEAT_FOLLOW_SURVIVE_TIME,
    WAVE_HEAT_STEP,
    WAVE_HEAT_CEILING,
    WAVE_BASE_REINFORCEMENTS,
    WAVE_REINFORCEMENT_DIVISOR,
    HAZARD_BURST_WAVE_INTERVAL,
    HAZARD_BURST_SIZE,
    HAZARD_BURST_SPREAD,
    HAZARD_MIN_RADIUS,
    HAZARD_MAX_RADIUS,
    HAZARD_MIN_TTL,
    HAZARD_MAX_TTL,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectiveCompletion:
    bonus: float
    message: str


def advance_objective(objective: Objective,
                      heat: float,
                      dt: float,
                      roll: float) -> Tuple[Objective, Optional[ObjectiveCompletion]]:
    """
    Advance the active objective by one tick.

    Pure function: the caller applies the bonus and shows the message.

    Args:
        objective: Currently active objective
        heat: Current heat level
        dt: Tick length in seconds
        roll: Uniform random number in [0, 1) used to pick the follow-up of Survive

    Returns:
        Tuple of (next objective, completion or None)
    """
    if isinstance(objective, Survive):
        remaining = objective.remaining - dt
        if remaining > 0:
            return Survive(remaining), None
        if roll < SURVIVE_TO_COLLECT_PROBABILITY:
            follow_up = CollectPickups(COLLECT_PICKUP_COUNT)
        else:
            follow_up = ReachHeat(REACH_HEAT_TARGET)
        return follow_up, ObjectiveCompletion(SURVIVE_BONUS, f"Objective complete +{SURVIVE_BONUS:.0f}")

    if isinstance(objective, CollectPickups):
        if objective.remaining > 0:
            return objective, None
        return (Survive(COLLECT_FOLLOW_SURVIVE_TIME),
                ObjectiveCompletion(COLLECT_BONUS, f"Pickup objective complete +{COLLECT_BONUS:.0f}"))

    if isinstance(objective, ReachHeat):
        if heat < objective.target:
            return objective, None
        return (Survive(REACH_HEAT_FOLLOW_SURVIVE_TIME),
                ObjectiveCompletion(REACH_HEAT_BONUS, f"Heat challenge complete +{REACH_HEAT_BONUS:.0f}"))

    raise TypeError(f"Unknown objective: {objective!r}")


def reinforcements_for_wave(wave: int) -> int:
    return WAVE_BASE_REINFORCEMENTS + wave // WAVE_REINFORCEMENT_DIVISOR


def check_wave_escalation(state: RunState) -> int:
    """
    Escalate to the next wave when heat crosses the threshold from below.

    Escalation is edge triggered: after a wave starts, heat that is still at
    or above the new threshold (always the case once it hits the ceiling)
    has to fall below it before the next wave can start.

    Returns:
        Number of pursuit agents to spawn, 0 when no escalation happened
    """
    if state.heat < state.next_wave_heat:
        state.wave_armed = True
        return 0
    if not state.wave_armed:
        return 0
    state.wave += 1
    state.next_wave_heat = min(WAVE_HEAT_CEILING, state.next_wave_heat + WAVE_HEAT_STEP)
    state.wave_armed = state.heat < state.next_wave_heat
    logger.info(f"Wave {state.wave} reached, next wave at heat {state.next_wave_heat:.0f}")
    return reinforcements_for_wave(state.wave)


def wave_triggers_hazard_burst(wave: int) -> bool:
    return wave % HAZARD_BURST_WAVE_INTERVAL == 0


def spawn_hazard_burst(zones: List[HazardZone], x: float, y: float, rng) -> List[HazardZone]:
    """Scatter a cluster of hazard zones around (x, y) and return the new zones"""
    burst = []
    for _ in range(HAZARD_BURST_SIZE):
        zone = HazardZone(
            x=x + float(rng.uniform(-HAZARD_BURST_SPREAD, HAZARD_BURST_SPREAD)),
            y=y + float(rng.uniform(-HAZARD_BURST_SPREAD, HAZARD_BURST_SPREAD)),
            radius=float(rng.uniform(HAZARD_MIN_RADIUS, HAZARD_MAX_RADIUS)),
            ttl=float(rng.uniform(HAZARD_MIN_TTL, HAZARD_MAX_TTL)),
        )
        burst.append(zone)
    zones.extend(burst)
    return burst
