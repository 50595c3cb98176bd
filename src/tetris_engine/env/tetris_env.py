from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_engine.game import (
    COLUMNS,
    KIND_COLORS,
    ROWS,
    Action,
    CellKind,
    GameConfig,
    TetrisGame,
)


EMPTY_COLOR = (30, 30, 36)


def snapshot_to_rgb(game: TetrisGame, cell: int = 12) -> np.ndarray:
    """Rasterise the engine snapshot, ghost cells at reduced intensity."""
    img = np.zeros((ROWS * cell, COLUMNS * cell, 3), dtype=np.uint8)
    for y, row in enumerate(game.snapshot()):
        for x, state in enumerate(row):
            if state.kind is None:
                color = EMPTY_COLOR
            elif state.state is CellKind.GHOST:
                color = tuple(int(c * 0.35) for c in KIND_COLORS[state.kind])
            else:
                color = KIND_COLORS[state.kind]
            img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
    return img


class TetrisEnv(gym.Env):
    """One environment step is one player action followed by gravity.

    Gravity is applied as a direct engine tick every `gravity_every`
    steps, so the episode does not depend on wall-clock time.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 gravity_every: int = 1,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        if gravity_every < 0:
            raise ValueError("gravity_every must be >= 0")
        self.game = TetrisGame(config)
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            "score": 0.01,     # reward per engine point
            "lines": 1.0,      # reward per line cleared
            "height": 0.02,    # penalize max height increase
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        kinds = len(KIND_COLORS)
        # Board: locked kinds positive, falling piece negative
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-kinds, high=kinds, shape=(ROWS, COLUMNS), dtype=np.int8),
                "next_kind": spaces.Discrete(kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.get_state().astype(np.int8),
            "next_kind": int(self.game.next_kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "level": self.game.level,
            "max_height": self.game.grid.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.restart()
        self.game.drain_events()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        if not self.action_space.contains(int(action)):
            raise ValueError(f"Invalid action {action!r}")

        score_before = self.game.score
        lines_before = self.game.lines_cleared
        height_before = self.game.grid.get_max_height()

        self.game.step(Action(int(action)))
        self._steps += 1
        if self.gravity_every and self._steps % self.gravity_every == 0:
            self.game.tick()

        reward_components: Dict[str, float] = {
            "score": self.reward_weights["score"] * float(self.game.score - score_before),
            "lines": self.reward_weights["lines"] * float(self.game.lines_cleared - lines_before),
            "height": -self.reward_weights["height"] * float(
                max(0, self.game.grid.get_max_height() - height_before)),
        }
        terminated = self.game.is_game_over
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        info = self._get_info()
        info["reward_components"] = reward_components
        info["events"] = [event.value for event in self.game.drain_events()]
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            return snapshot_to_rgb(self.game)
        return None

    def close(self) -> None:
        self.game.stop()
