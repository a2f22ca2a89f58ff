"""Gymnasium environments for Shape Puzzle RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Build phase (7x7) and main phase (11x11) as one episode
register(
    id="ShapePuzzle-v0",
    entry_point="shape_puzzle_rl.env.shape_puzzle_env:ShapePuzzleEnv",
)

__all__ = ["ShapePuzzle-v0"]
