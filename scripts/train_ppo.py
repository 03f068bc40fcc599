"""
Train a PPO agent on AlchemyEnv with stable-baselines3.
"""

import argparse
import os
import sys

from stable_baselines3 import PPO
from stable_baselines3.common.callbacks import CheckpointCallback
from stable_baselines3.common.env_checker import check_env
from stable_baselines3.common.vec_env import DummyVecEnv, SubprocVecEnv

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ai.environment import AlchemyEnv
from alchemy.engine import GameConfig

# --- Configuration ---
LOG_DIR = "ppo_alchemy_logs"
MODEL_SAVE_PATH = os.path.join("models", "ppo_alchemy_model")
LEARNING_RATE = 0.0003
N_STEPS = 2048
BATCH_SIZE = 64
N_EPOCHS = 10
GAMMA = 0.99
GAE_LAMBDA = 0.95
CLIP_RANGE = 0.2
ENT_COEF = 0.01
VF_COEF = 0.5


def make_env(rank, seed=0, skill_level=1):
    """Factory for one environment of a vectorised set."""
    def _init():
        env = AlchemyEnv(GameConfig(skill_level=skill_level))
        env.reset(seed=seed + rank)
        return env
    return _init


def main():
    parser = argparse.ArgumentParser(description="Train PPO on All That Glitters")
    parser.add_argument('--timesteps', type=int, default=1_000_000, help='Total training timesteps')
    parser.add_argument('--envs', type=int, default=4, help='Number of parallel environments')
    parser.add_argument('--seed', type=int, default=0, help='Base seed')
    parser.add_argument('--skill-level', type=int, default=1, choices=[1, 2, 3], help='Starting skill level')
    parser.add_argument('--check', action='store_true', help='Run the gymnasium API checker first')
    args = parser.parse_args()

    os.makedirs(LOG_DIR, exist_ok=True)
    os.makedirs(os.path.dirname(MODEL_SAVE_PATH), exist_ok=True)

    if args.check:
        print("Checking environment...")
        check_env(AlchemyEnv(), warn=True)
        print("Environment check passed.")

    print(f"Creating {args.envs} environments...")
    env_fns = [make_env(i, args.seed, args.skill_level) for i in range(args.envs)]
    vec_env = SubprocVecEnv(env_fns) if args.envs > 1 else DummyVecEnv(env_fns)

    checkpoint_callback = CheckpointCallback(
        save_freq=max(100_000 // args.envs, 1),
        save_path=LOG_DIR,
        name_prefix="alchemy_ppo_model",
    )

    model = PPO(
        "MultiInputPolicy",
        vec_env,
        learning_rate=LEARNING_RATE,
        n_steps=N_STEPS,
        batch_size=BATCH_SIZE,
        n_epochs=N_EPOCHS,
        gamma=GAMMA,
        gae_lambda=GAE_LAMBDA,
        clip_range=CLIP_RANGE,
        ent_coef=ENT_COEF,
        vf_coef=VF_COEF,
        policy_kwargs=dict(net_arch=dict(pi=[128, 128], vf=[128, 128])),
        verbose=1,
        seed=args.seed,
        tensorboard_log=LOG_DIR,
    )

    print(f"Starting training for {args.timesteps} timesteps...")
    try:
        model.learn(total_timesteps=args.timesteps, callback=[checkpoint_callback])
        model.save(MODEL_SAVE_PATH)
        print(f"Final model saved to {MODEL_SAVE_PATH}.zip")
    finally:
        vec_env.close()
        print("Environments closed.")


if __name__ == "__main__":
    main()
