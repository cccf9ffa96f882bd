from collections import defaultdict

import pygame

from pursuit.controls import KeyAction, action_for_event, intent_from_keys


def _pressed(*keys):
    pressed = defaultdict(bool)
    for key in keys:
        pressed[key] = True
    return pressed


def test_held_keys_build_intent():
    intent = intent_from_keys(_pressed(pygame.K_UP, pygame.K_a, pygame.K_LSHIFT))

    assert intent.throttle
    assert intent.steer == -1
    assert intent.boost
    assert not intent.brake
    assert not intent.reverse


def test_opposite_steering_cancels_out():
    intent = intent_from_keys(_pressed(pygame.K_LEFT, pygame.K_RIGHT, pygame.K_SPACE))

    assert intent.steer == 0
    assert intent.brake


def test_no_keys_is_no_input():
    intent = intent_from_keys(_pressed())

    assert not any((intent.throttle, intent.reverse, intent.brake, intent.boost))
    assert intent.steer == 0


def test_one_shot_keys():
    assert action_for_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_e)) is KeyAction.PULSE
    assert action_for_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p)) is KeyAction.PAUSE
    assert action_for_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_m)) is KeyAction.CYCLE_MAP
    assert action_for_event(pygame.event.Event(pygame.QUIT)) is KeyAction.QUIT
    assert action_for_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_e)) is None
    assert action_for_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_z)) is None


def test_one_shot_actions_become_intent_triggers():
    intent = intent_from_keys(_pressed(pygame.K_UP), [KeyAction.PULSE, KeyAction.CYCLE_MAP])

    assert intent.throttle
    assert intent.fire_pulse
    assert intent.cycle_map
    assert not intent.toggle_pause
    assert not intent.restart

    assert not intent_from_keys(_pressed()).fire_pulse
