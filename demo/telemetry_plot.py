"""
Headless telemetry run.

Drives the chase engine with the rule-based driver for a fixed amount of
simulated time and plots score, heat, combo and wave over time.
"""

import sys
import os
import matplotlib.pyplot as plt
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
from pursuit.chase_env import ChaseEnv
from default_control import chase_control


SIMULATED_SECONDS = 120.0
SEED = 7


def collect_telemetry(env, seconds):
    history = {
        'time': [],
        'score': [],
        'heat': [],
        'combo': [],
        'wave': [],
        'lives': [],
    }
    obs, info = env.reset(seed=SEED)
    steps = int(seconds / env.tick_dt)
    for _ in range(steps):
        obs, reward, terminated, truncated, info = env.step(chase_control(obs))
        if terminated or truncated:
            break
        history['time'].append(info['elapsed_time'])
        history['score'].append(info['score'])
        history['heat'].append(info['heat'])
        history['combo'].append(info['combo'])
        history['wave'].append(info['wave'])
        history['lives'].append(info['lives'])
    return history


def plot_telemetry(history):
    fig, axes = plt.subplots(4, 1, figsize=(10, 10), sharex=True)

    axes[0].plot(history['time'], history['score'], color='tab:blue')
    axes[0].set_ylabel('Score')
    axes[0].grid(True)

    axes[1].plot(history['time'], history['heat'], color='tab:red')
    axes[1].set_ylabel('Heat (%)')
    axes[1].set_ylim(0, 100)
    axes[1].grid(True)

    axes[2].plot(history['time'], history['combo'], color='tab:purple')
    axes[2].set_ylabel('Combo')
    axes[2].grid(True)

    axes[3].step(history['time'], history['wave'], where='post', label='wave')
    axes[3].step(history['time'], history['lives'], where='post', label='lives')
    axes[3].set_ylabel('Wave / Lives')
    axes[3].set_xlabel('Simulated time (s)')
    axes[3].legend()
    axes[3].grid(True)

    fig.suptitle('Chase telemetry')
    fig.tight_layout()
    plt.show()


if __name__ == "__main__":
    env = ChaseEnv(render_mode=None)
    try:
        history = collect_telemetry(env, SIMULATED_SECONDS)
    finally:
        env.close()
    print(f"Collected {len(history['time'])} samples, final score {history['score'][-1]:.0f}" if history['time'] else "No samples collected")
    plot_telemetry(history)
