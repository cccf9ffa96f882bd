#!/usr/bin/env python3
"""Demo script showing discrete action space control of the chase environment."""

import sys
import os
import pygame
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from pursuit.chase_env import ChaseEnv

ACTION_NAMES = ["Coast", "Accelerate", "Accel Left", "Accel Right", "Brake", "Reverse", "Boost", "Pulse"]


def run_discrete_demo():
    """Run interactive demo with discrete keyboard controls."""

    env = ChaseEnv(render_mode="human")

    print("=== Discrete Action Chase Demo ===")
    print("Controls:")
    print("  UP Arrow         - Accelerate (Action 1)")
    print("  UP + LEFT/RIGHT  - Accelerate and turn (Actions 2, 3)")
    print("  SPACE            - Brake (Action 4)")
    print("  DOWN Arrow       - Reverse (Action 5)")
    print("  SHIFT            - Boost (Action 6)")
    print("  E                - Energy pulse (Action 7)")
    print("  No key           - Coast (Action 0)")
    print("  R                - Reset environment")
    print("  ESC              - Quit")
    print("")
    print("Action Space:", env.action_space)
    print("Number of discrete actions:", env.action_space.n)

    obs, info = env.reset()
    done = False
    total_reward = 0

    # Initial render to ensure pygame is initialized
    env.render()

    while not done:
        if env.check_quit_requested():
            break

        keys = pygame.key.get_pressed()

        action = 0
        if keys[pygame.K_e]:
            action = 7
        elif keys[pygame.K_LSHIFT] or keys[pygame.K_RSHIFT]:
            action = 6
        elif keys[pygame.K_SPACE]:
            action = 4
        elif keys[pygame.K_DOWN]:
            action = 5
        elif keys[pygame.K_LEFT]:
            action = 2
        elif keys[pygame.K_RIGHT]:
            action = 3
        elif keys[pygame.K_UP]:
            action = 1

        if keys[pygame.K_r]:
            obs, info = env.reset()
            total_reward = 0
            print("\nEnvironment reset!")
            continue

        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += reward

        # Render also paces the loop at the render FPS
        env.render()

        print(f"\rAction: {ACTION_NAMES[action]:12} | Score: {info['score']:8.0f} | "
              f"Heat: {info['heat']:5.1f}% | Lives: {info['lives']} | Total: {total_reward:8.2f}", end="")

        if terminated or truncated:
            print(f"\nEpisode ended! Total reward: {total_reward:.2f}")
            obs, info = env.reset()
            total_reward = 0

    env.close()
    print("\nDemo ended.")

if __name__ == "__main__":
    run_discrete_demo()
