import sys
import os

from stable_baselines3 import DQN
from stable_baselines3.common.vec_env import DummyVecEnv
from stable_baselines3.common.monitor import Monitor
from stable_baselines3.common.callbacks import BaseCallback

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pursuit.chase_env import ChaseEnv


class SaveModelCallback(BaseCallback):
    """
    Callback for saving the model every n steps.
    """
    def __init__(self, save_freq: int = 250000, save_path: str = "./learn/checkpoints", verbose: int = 0):
        super(SaveModelCallback, self).__init__(verbose)
        self.save_freq = save_freq
        self.save_path = save_path
        self.save_count = 0

        # Create save directory if it doesn't exist
        os.makedirs(save_path, exist_ok=True)

    def _on_step(self) -> bool:
        if self.n_calls % self.save_freq == 0:
            self.save_count += 1
            model_path = os.path.join(self.save_path, f"model_{self.num_timesteps}_steps")
            self.model.save(model_path)

            if self.verbose > 0:
                print(f"Saved model checkpoint to {model_path} at step {self.num_timesteps}")

        return True


class RunStatsCallback(BaseCallback):
    """
    Callback printing mean score and wave of finished episodes.
    """
    def __init__(self, report_freq: int = 50000, verbose: int = 0):
        super().__init__(verbose)
        self.report_freq = report_freq
        self.scores = []
        self.waves = []

    def _on_step(self) -> bool:
        for done, info in zip(self.locals["dones"], self.locals["infos"]):
            if done:
                self.scores.append(info["score"])
                self.waves.append(info["wave"])
        if self.n_calls % self.report_freq == 0 and self.scores:
            mean_score = sum(self.scores) / len(self.scores)
            mean_wave = sum(self.waves) / len(self.waves)
            self.logger.record("chase/mean_score", mean_score)
            self.logger.record("chase/mean_wave", mean_wave)
            if self.verbose > 0:
                print(f"[Run stats] Step {self.num_timesteps}: "
                      f"episodes={len(self.scores)}, mean_score={mean_score:.0f}, mean_wave={mean_wave:.2f}")
            self.scores.clear()
            self.waves.clear()
        return True


CHECKPOINT_DIR = "./learn/checkpoints"
RESUME_MODEL = os.path.join(CHECKPOINT_DIR, "model_XXXXXXXXXXXXX_steps.zip")

# Create log dir
log_dir = "./logs/"
os.makedirs(log_dir, exist_ok=True)

def make_env(rank):
    def _init():
        env = ChaseEnv(
            render_mode=None,
            game_data_file="maps/game_data.json",
            weather_id="clear",
            difficulty_id="driver",
        )
        return Monitor(env, filename=os.path.join(log_dir, f"monitor_{rank}.csv"))
    return _init

def linear_schedule(initial_value, final_value=1e-5):
    initial_value = float(initial_value)
    final_value = float(final_value)
    def schedule(progress_remaining: float) -> float:
        # progress_remaining goes from 1.0 (start) to 0.0 (end)
        return final_value + (initial_value - final_value) * progress_remaining
    return schedule


if __name__ == "__main__":
    # Create 8 environments
    env = DummyVecEnv([make_env(i) for i in range(8)])

    # Try to load existing model
    if os.path.exists(RESUME_MODEL):
        model = DQN.load(RESUME_MODEL)
        model.set_env(env)
        print("Loaded existing model for continued training")
    else:
        model = DQN(
            "MlpPolicy", env,
            learning_rate=linear_schedule(5e-4, 5e-5),
            buffer_size=500_000,
            batch_size=256,
            gamma=0.99,
            train_freq=4,
            gradient_steps=2,
            target_update_interval=10_000,
            exploration_fraction=0.2,
            exploration_final_eps=0.03,
            learning_starts=50_000,
            verbose=1,
            tensorboard_log='./tensorboard/',
            policy_kwargs=dict(net_arch=[256, 256])
        )
        print("Created new model")

    # Callbacks
    save_callback = SaveModelCallback(save_freq=250000, save_path=CHECKPOINT_DIR, verbose=1)
    stats_callback = RunStatsCallback(report_freq=50000, verbose=1)

    # Train
    model.learn(
        total_timesteps=5_000_000,
        tb_log_name="chase_run_1",
        log_interval=10,
        callback=[save_callback, stats_callback]
    )

    # Save final model
    model.save(os.path.join(CHECKPOINT_DIR, "final_model"))
