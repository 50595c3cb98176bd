import gymnasium as gym
import numpy as np
import pytest

import tetris_engine.env  # noqa: F401
from tetris_engine.env.tetris_env import TetrisEnv
from tetris_engine.game import COLUMNS, ROWS, Action, GridPoint, Piece, TetrominoKind


def test_registered_env_resets_and_steps():
    env = gym.make("Tetris-10x20-v0")
    obs, info = env.reset(seed=0)
    assert obs["board"].shape == (ROWS, COLUMNS)
    assert obs["board"].dtype == np.int8
    assert (obs["board"] < 0).sum() == 4
    assert 1 <= obs["next_kind"] <= 7
    assert info["score"] == 0
    obs, reward, terminated, truncated, info = env.step(int(Action.NONE))
    assert not terminated and not truncated
    assert info["events"] == []
    env.close()


def test_seeded_reset_is_reproducible():
    env = TetrisEnv()
    first, _ = env.reset(seed=42)
    kinds_a = [env.game.current_piece.kind, env.game.next_kind]
    env.reset(seed=42)
    kinds_b = [env.game.current_piece.kind, env.game.next_kind]
    assert kinds_a == kinds_b


def test_hard_drop_reward_and_events():
    env = TetrisEnv(gravity_every=0)
    env.reset(seed=1)
    env.game.current_piece = Piece(TetrominoKind.I)
    env.game.origin = GridPoint(3, 0)
    _, reward, terminated, _, info = env.step(int(Action.HARD_DROP))
    assert info["score"] == 36
    assert info["events"] == ["hard_drop", "lock", "spawn"]
    assert info["max_height"] == 1
    assert reward == pytest.approx(0.36 - 0.02)
    assert not terminated


def test_gravity_applied_every_step():
    env = TetrisEnv(gravity_every=1)
    env.reset(seed=3)
    env.game.current_piece = Piece(TetrominoKind.O)
    env.game.origin = GridPoint(3, 0)
    env.step(int(Action.NONE))
    assert env.game.origin == GridPoint(3, 1)


def test_invalid_action_raises():
    env = TetrisEnv()
    env.reset(seed=0)
    with pytest.raises(ValueError):
        env.step(len(Action))


def test_truncation_and_termination():
    env = TetrisEnv(max_episode_steps=3)
    env.reset(seed=0)
    truncated = False
    for _ in range(3):
        _, _, terminated, truncated, _ = env.step(int(Action.NONE))
    assert truncated

    env = TetrisEnv(terminal_penalty=-5.0)
    env.reset(seed=0)
    terminated = False
    for _ in range(200):
        _, reward, terminated, _, info = env.step(int(Action.HARD_DROP))
        if terminated:
            break
    assert terminated
    assert info["reward_components"]["terminal"] == -5.0


def test_rgb_render_shape():
    env = TetrisEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (ROWS * 12, COLUMNS * 12, 3)
    assert img.dtype == np.uint8
    assert img.any()
