"""
Keyboard mapping for the interactive viewer.

Held keys are sampled once per frame into a ControlIntent. One-shot keys
(pulse, pause, restart, map cycle) come from KEYDOWN events and ride along
as trigger flags on the same intent.
"""

from enum import Enum
from typing import Iterable, Optional
import pygame
from .vehicle_physics import ControlIntent


class KeyAction(Enum):
    PULSE = "pulse"
    PAUSE = "pause"
    RESTART = "restart"
    CYCLE_MAP = "cycle_map"
    QUIT = "quit"


THROTTLE_KEYS = (pygame.K_UP, pygame.K_w)
REVERSE_KEYS = (pygame.K_DOWN, pygame.K_s)
LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
BRAKE_KEYS = (pygame.K_SPACE,)
BOOST_KEYS = (pygame.K_LSHIFT, pygame.K_RSHIFT)

KEYDOWN_ACTIONS = {
    pygame.K_e: KeyAction.PULSE,
    pygame.K_p: KeyAction.PAUSE,
    pygame.K_r: KeyAction.RESTART,
    pygame.K_m: KeyAction.CYCLE_MAP,
    pygame.K_ESCAPE: KeyAction.QUIT,
}


def _any_pressed(pressed, keys) -> bool:
    return any(pressed[key] for key in keys)


def intent_from_keys(pressed, actions: Iterable[KeyAction] = ()) -> ControlIntent:
    """
    Build the driver intent from held keys and this frame's one-shot actions.

    Args:
        pressed: Sequence indexed by pygame key code, as returned by pygame.key.get_pressed()
        actions: KeyActions collected from this frame's events

    Returns:
        ControlIntent for this frame
    """
    actions = set(actions)
    steer = int(_any_pressed(pressed, RIGHT_KEYS)) - int(_any_pressed(pressed, LEFT_KEYS))
    return ControlIntent(
        throttle=_any_pressed(pressed, THROTTLE_KEYS),
        reverse=_any_pressed(pressed, REVERSE_KEYS),
        steer=steer,
        brake=_any_pressed(pressed, BRAKE_KEYS),
        boost=_any_pressed(pressed, BOOST_KEYS),
        fire_pulse=KeyAction.PULSE in actions,
        toggle_pause=KeyAction.PAUSE in actions,
        restart=KeyAction.RESTART in actions,
        cycle_map=KeyAction.CYCLE_MAP in actions,
    )


def action_for_event(event) -> Optional[KeyAction]:
    """Map a pygame event to a one-shot action, None if it is not one"""
    if event.type == pygame.QUIT:
        return KeyAction.QUIT
    if event.type == pygame.KEYDOWN:
        return KEYDOWN_ACTIONS.get(event.key)
    return None
