"""
Random action demonstration.

This demo drives the chase environment with random discrete actions.
"""

import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from pursuit.chase_env import ChaseEnv, ACTION_TABLE



def main():
    print("=" * 50)

    env = ChaseEnv(render_mode="human", weather_id="storm")

    print("Action space:", env.action_space)
    print("Observation space:", env.observation_space.shape)

    try:
        # Reset environment first
        obs, info = env.reset()
        print("\n🚗 Running simulation with random actions...")
        print(f"   {len(ACTION_TABLE)} discrete actions")
        total_reward = 0.0

        for step in range(100000):
            if env.check_quit_requested():
                print(f"   User requested quit at step {step}")
                break

            action = env.action_space.sample()

            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward

            env.render()

            if terminated or truncated:
                print(f"   Episode ended at step {step}, wave {info['wave']}, "
                      f"score {info['score']:.0f}, total reward: {total_reward:.2f}")
                obs, info = env.reset()
                total_reward = 0.0

    except Exception as e:
        print(f"\n❌ Error during demo: {e}")
        import traceback
        traceback.print_exc()

    finally:
        env.close()
        print("🔒 Environment closed")



if __name__ == "__main__":
    main()
