"""
Default rule-based driver for the chase environment.

This module steers away from the nearest pursuit agent and fires the
energy pulse when several agents are close, using only the observation.
"""

import math
import numpy as np


# Observation indices (see ChaseEnv._get_obs)
SPEED_INDEX = 4
SIN_HEADING_INDEX = 5
COS_HEADING_INDEX = 6
BOOST_INDEX = 7
PULSE_INDEX = 8
AGENTS_START_INDEX = 15

# Discrete actions (see ACTION_TABLE in pursuit.chase_env)
ACTION_ACCELERATE = 1
ACTION_LEFT = 2
ACTION_RIGHT = 3
ACTION_BOOST = 6
ACTION_PULSE = 7

# Tuning
DANGER_DISTANCE = 0.12  # normalized distance where an agent counts as close
PULSE_MIN_CHARGE = 0.3
STEER_DEADZONE = 0.25  # radians


def chase_control(observation):
    """
    Pick a discrete action that runs away from the nearest agent.

    Args:
        observation: numpy array of shape (21,) containing:
            - Position (x, y): indices 0-1
            - Velocity (x, y, magnitude): indices 2-4
            - Heading as (sin, cos): indices 5-6
            - Boost, pulse charge, shield: indices 7-9
            - Heat, combo, lives: indices 10-12
            - Nearest pickup distance, obstacle clearance: indices 13-14
            - Three nearest agents as (dx, dy): indices 15-20

    Returns:
        Discrete action index
    """
    agents = np.asarray(observation[AGENTS_START_INDEX:], dtype=np.float32).reshape(-1, 2)
    distances = np.hypot(agents[:, 0], agents[:, 1])

    close = int(np.sum(distances < DANGER_DISTANCE))
    if close >= 2 and observation[PULSE_INDEX] > PULSE_MIN_CHARGE:
        return ACTION_PULSE

    nearest = agents[int(np.argmin(distances))]
    # Flee in the direction opposite to the nearest agent
    flee_angle = math.atan2(-nearest[1], -nearest[0])
    heading = math.atan2(observation[SIN_HEADING_INDEX], observation[COS_HEADING_INDEX])
    error = (flee_angle - heading + math.pi) % (2 * math.pi) - math.pi

    if error > STEER_DEADZONE:
        return ACTION_RIGHT
    if error < -STEER_DEADZONE:
        return ACTION_LEFT
    if distances.min() < DANGER_DISTANCE and observation[BOOST_INDEX] > 0:
        return ACTION_BOOST
    return ACTION_ACCELERATE
