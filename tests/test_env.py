import gymnasium as gym
import numpy as np

import shape_puzzle_rl.env  # noqa: F401
from shape_puzzle_rl.env.shape_puzzle_env import ShapePuzzleEnv
from shape_puzzle_rl.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper
from shape_puzzle_rl.game import GameConfig, PhaseKind


def _first_legal(mask):
    return tuple(int(v) for v in np.argwhere(mask)[0])


def test_spaces_and_reset():
    env = ShapePuzzleEnv(GameConfig(random_seed=1))
    obs, info = env.reset(seed=1)
    assert env.action_space.nvec.tolist() == [3, 8, 11, 11]
    assert obs["board"].shape == (11, 11)
    assert obs["shapes"].shape == (3, 7, 7)
    assert obs["phase"] == int(PhaseKind.BUILD)
    assert info["action_mask"].shape == (3, 8, 11, 11)
    # build grid is 7x7, so no anchors beyond it
    assert not info["action_mask"][:, :, 7:, :].any()
    assert not info["action_mask"][:, :, :, 7:].any()
    assert env.observation_space.contains(obs)


def test_invalid_action_is_penalised():
    env = ShapePuzzleEnv(GameConfig(random_seed=2))
    env.reset(seed=2)
    obs, reward, terminated, truncated, info = env.step((0, 0, 10, 10))
    assert reward < 0
    assert "invalid" in info["reward_components"]
    assert not terminated and not truncated


def test_full_cycle_through_both_phases():
    env = ShapePuzzleEnv(GameConfig(random_seed=3))
    obs, info = env.reset(seed=3)
    for _ in range(3):
        obs, reward, terminated, truncated, info = env.step(_first_legal(info["action_mask"]))
        assert reward > 0
    assert obs["phase"] == int(PhaseKind.MAIN)
    assert obs["shapes"][0].any()
    assert not obs["shapes"][1:].any()
    assert not info["action_mask"][1:].any()

    obs, reward, terminated, truncated, info = env.step(_first_legal(info["action_mask"]))
    assert obs["phase"] == int(PhaseKind.BUILD)
    assert env.session.cycles_completed == 1
    assert not terminated


def test_orientation_is_applied_before_drop():
    env = ShapePuzzleEnv(GameConfig(random_seed=4))
    obs, info = env.reset(seed=4)
    mask = info["action_mask"]
    legal = np.argwhere(mask[0, 3])
    y, x = (int(v) for v in legal[0])
    _, _, _, _, info = env.step((0, 3, y, x))
    shape = env.session.build.shapes[0]
    assert shape.placed
    h, w = shape.matrix.shape
    placed = env.session.build.grid.grid[y : y + h, x : x + w]
    assert np.array_equal(placed & shape.matrix, shape.matrix)


def test_registered_env_with_wrappers():
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(gym.make("ShapePuzzle-v0")))
    obs, info = env.reset(seed=5)
    assert env.action_space.n == 3 * 8 * 11 * 11
    mask = env.get_action_mask()
    assert mask.shape == (env.action_space.n,)
    assert mask.any()
    invalid = int(np.flatnonzero(~mask)[0])
    obs, reward, terminated, truncated, info = env.step(invalid)
    # resampled into a legal placement
    assert "invalid" not in info["reward_components"]
    assert env.unwrapped.session.total_placements == 1


def test_flatten_round_trip_order():
    env = FlattenDiscreteActionWrapper(ShapePuzzleEnv(GameConfig(random_seed=6)))
    idx = ((2 * 8 + 5) * 11 + 4) * 11 + 9
    assert env.action(idx).tolist() == [2, 5, 4, 9]
