"""
Interactive chase demonstration.

Drive the player vehicle with the keyboard while the pursuit agents close in.
"""

import sys
import os
import logging
import pygame
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from pursuit.config_set import ConfigError, load_game_data
from pursuit.controls import KeyAction, action_for_event, intent_from_keys
from pursuit.engine import ChaseEngine
from pursuit.renderer import Renderer
from pursuit.score_store import JsonScoreStore
from pursuit.constants import (
    DEFAULT_GAME_DATA_FILE,
    DEFAULT_SCORE_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FORMAT,
)


def main():
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format=DEFAULT_LOG_FORMAT)
    print("=" * 50)
    print("🚓 NEON PURSUIT")
    print("=" * 50)

    try:
        game_data = load_game_data(DEFAULT_GAME_DATA_FILE)
        engine = ChaseEngine(game_data, score_store=JsonScoreStore(DEFAULT_SCORE_FILE), weather_id="rain")
    except ConfigError as e:
        logging.getLogger(__name__).error(f"Cannot start: {e}")
        return 1

    renderer = Renderer(map_config=engine.map)

    print("🎮 CONTROLS:")
    print("   Arrows / WASD: Drive")
    print("   Space: Brake")
    print("   Shift: Boost")
    print("   E: Energy pulse")
    print("   P: Pause")
    print("   R: Restart")
    print("   M: Next map")
    print("   C: Change camera")
    print("   ESC: Exit")

    running = True
    try:
        renderer.render_frame(engine.get_snapshot())
        renderer.tick_seconds()
        while running:
            actions = set()
            for event in pygame.event.get():
                action = action_for_event(event)
                if action is KeyAction.QUIT:
                    running = False
                elif action is not None:
                    actions.add(action)

            map_id = engine.map.id
            engine.tick(renderer.tick_seconds(), intent_from_keys(pygame.key.get_pressed(), actions))
            if engine.map.id != map_id:
                renderer.set_map(engine.map)
                print(f"🗺️  Map: {engine.map.name}")
            for message in engine.drain_events():
                print(f"   {message.text}")
            renderer.render_frame(engine.get_snapshot())

    except KeyboardInterrupt:
        print("\n   Interrupted")

    finally:
        engine.close()
        renderer.close()
        print(f"🏁 Best score: {int(engine.state.best_score)}")
        print("🔒 Demo closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
