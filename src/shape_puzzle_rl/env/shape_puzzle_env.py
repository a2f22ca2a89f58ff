from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from shape_puzzle_rl.game import GameConfig, GameSession, PhaseState, ScoringRules, orientations, valid_anchors

N_ORIENTATIONS = 8


def _slot_count(config: GameConfig) -> int:
    return max(1, config.source_shape_count)


def _shape_frame(config: GameConfig) -> int:
    return max(config.build_width, config.build_height, config.scratch_size)


def _board_frame(config: GameConfig) -> Tuple[int, int]:
    return max(config.main_height, config.build_height), max(config.main_width, config.build_width)


def _compute_action_mask(session: GameSession) -> np.ndarray:
    config = session.config
    h, w = _board_frame(config)
    mask = np.zeros((_slot_count(config), N_ORIENTATIONS, h, w), dtype=np.bool_)
    if session.game_over or session.state != PhaseState.AWAITING_PLACEMENT:
        return mask
    phase = session.current
    for slot, shape in enumerate(phase.shapes):
        if shape.placed or slot >= mask.shape[0]:
            continue
        for o, matrix in enumerate(orientations(shape.matrix)):
            for x, y in valid_anchors(phase.grid, matrix):
                mask[slot, o, y, x] = True
    return mask


class ShapePuzzleEnv(gym.Env):
    """Both phases of the compose-and-place game as one episode.

    Action (slot, orientation, row, col): orient the shape in `slot` (see
    `orientations()`), then drop it with its top-left at (col, row) on the
    current phase's grid. Completed phases advance automatically.
    """

    metadata = {"render_modes": []}

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = -1.0) -> None:
        super().__init__()
        self.session = GameSession(config, rules)

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.reward_weights: Dict[str, float] = {
            "cells": 0.01,   # per cell committed in either phase
            "score": 0.01,   # per point of engine score
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        config = self.session.config
        k = _slot_count(config)
        h, w = _board_frame(config)
        s = _shape_frame(config)

        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=1, shape=(h, w), dtype=np.int8),
                "phase": spaces.Discrete(2),
                "shapes": spaces.Box(low=0, high=1, shape=(k, s, s), dtype=np.int8),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, N_ORIENTATIONS, h, w))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        config = self.session.config
        phase = self.session.current
        h, w = _board_frame(config)
        s = _shape_frame(config)
        board = np.zeros((h, w), dtype=np.int8)
        grid = phase.grid.grid
        board[: grid.shape[0], : grid.shape[1]] = grid
        shapes = np.zeros((_slot_count(config), s, s), dtype=np.int8)
        for slot, shape in enumerate(phase.shapes[: shapes.shape[0]]):
            if shape.placed:
                continue
            m = shape.matrix[:s, :s]
            shapes[slot, : m.shape[0], : m.shape[1]] = m
        return {
            "board": board,
            "phase": int(self.session.phase),
            "shapes": shapes,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.session),
            "score": self.session.score,
            "phase": int(self.session.phase),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.session.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int, int]):
        slot, orientation, y, x = map(int, action)

        reward_components: Dict[str, float] = {}
        gained = 0
        mask = _compute_action_mask(self.session)
        legal = (
            0 <= slot < mask.shape[0]
            and 0 <= orientation < N_ORIENTATIONS
            and 0 <= y < mask.shape[2]
            and 0 <= x < mask.shape[3]
            and bool(mask[slot, orientation, y, x])
        )

        if legal:
            shape = self.session.current.shapes[slot]
            shape.orient(orientation)
            outcome = self.session.drop(slot, x, y)
            gained = outcome.score_delta
            reward_components["cells"] = self.reward_weights["cells"] * float(len(outcome.cells))
            reward_components["score"] = self.reward_weights["score"] * float(gained)
            if self.session.state == PhaseState.PHASE_COMPLETE:
                self.session.advance()
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        reward_components["step"] = self.step_penalty
        terminated = bool(self.session.game_over)
        self._steps += 1
        truncated = self._steps >= self.session.config.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(gained)
        return self._get_obs(), reward, terminated, truncated, info

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.session)

    def close(self) -> None:
        pass
