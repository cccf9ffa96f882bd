"""
DQN-powered driver for the chase environment.

This module loads a trained DQN model to pick discrete actions for the
player vehicle. Falls back to the rule-based driver in default_control
if the model checkpoint cannot be loaded.
"""

import os
import sys
from stable_baselines3 import DQN

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
from default_control import chase_control


MODEL_FILE = "learn/checkpoints/final_model.zip"

# Global state for the DQN model
model_state = {
    'dqn_model': None,
    'model_loaded': False,
    'use_fallback': False
}


def load_dqn_model():
    """
    Load the trained DQN model from checkpoint.

    Returns:
        bool: True if model loaded successfully, False otherwise
    """
    model_path = os.path.join(".", MODEL_FILE)

    # Check if running from demo/ directory, adjust path accordingly
    if not os.path.exists(model_path):
        model_path = os.path.join("..", MODEL_FILE)

    try:
        model_state['dqn_model'] = DQN.load(model_path)
        model_state['model_loaded'] = True
        print(f"Successfully loaded DQN model from {model_path}")
        return True
    except (OSError, ValueError) as e:
        print(f"Failed to load DQN model: {e}")
        print("Falling back to rule-based control")
        model_state['use_fallback'] = True
        return False


def dqn_control(observation):
    """
    Pick a discrete action for the observation using the trained DQN model.

    Args:
        observation: numpy array of shape (21,), see default_control.chase_control

    Returns:
        Discrete action index
    """
    # Try to load DQN model on first call
    if not model_state['model_loaded'] and not model_state['use_fallback']:
        load_dqn_model()

    if model_state['model_loaded']:
        action, _ = model_state['dqn_model'].predict(observation, deterministic=True)
        return int(action)

    return chase_control(observation)


def main():
    from pursuit.chase_env import ChaseEnv

    env = ChaseEnv(render_mode="human")
    try:
        obs, info = env.reset()
        while not env.check_quit_requested():
            obs, reward, terminated, truncated, info = env.step(dqn_control(obs))
            env.render()
            if terminated or truncated:
                print(f"🏁 Episode over: score {info['score']:.0f}, wave {info['wave']}")
                obs, info = env.reset()
    finally:
        env.close()
        print("🔒 Environment closed")


if __name__ == "__main__":
    sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
    main()
