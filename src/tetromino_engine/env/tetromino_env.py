from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_engine.game import Action, GameConfig, Phase, TetrominoGame, TetrominoType


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (30, 30, 36),
        1: (0, 240, 240),  # I
        2: (0, 0, 240),    # J
        3: (240, 160, 0),  # L
        4: (240, 240, 0),  # O
        5: (0, 240, 0),    # S
        6: (160, 0, 240),  # T
        7: (240, 0, 0),    # Z
    }
    return palette.get(abs(v), (200, 200, 200))


class TetrominoEnv(gym.Env):
    """Gymnasium wrapper that feeds discrete intents to a `TetrominoGame`.

    Reward is the engine score delta. One gravity tick is applied after every
    `gravity_every` steps, unless the step already locked a piece.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        gravity_every: int = 1,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        if gravity_every <= 0:
            raise ValueError("gravity_every must be positive")
        self.game = TetrominoGame(config)
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.max_episode_steps = int(max_episode_steps)

        height = self.game.config.board_height
        width = self.game.config.board_width
        n_types = len(TetrominoType)
        # Locked cells are positive type ids, the falling piece is negative
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_types, high=n_types, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(n_types + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._last_obs: Optional[Dict[str, Any]] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.game.get_state().astype(np.int8),
            "next_piece": int(self.game.next_type or 0),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "pieces_locked": self.game.pieces_locked,
            "level": self.game.level,
            "max_height": self.game.grid.get_max_height(),
            "holes": self.game.grid.count_holes(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.randomizer.rng.seed(seed)
        self.game.start_game()
        self._steps = 0
        obs = self._get_obs()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        if self.game.phase == Phase.IDLE:
            raise RuntimeError("call reset() before step()")
        action = Action(int(action))
        locked_before = self.game.pieces_locked

        _, reward, terminated, info = self.game.step(action)
        self._steps += 1
        locked = self.game.pieces_locked != locked_before
        if not terminated and not locked and self._steps % self.gravity_every == 0:
            score_before = self.game.score
            self.game.tick()
            reward += self.game.score - score_before
            terminated = self.game.game_over

        truncated = not terminated and self._steps >= self.max_episode_steps
        obs = self._get_obs()
        info = self._get_info()
        info["phase"] = self.game.phase.value
        self._last_obs = obs
        return obs, float(reward), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        board = self._last_obs["board"] if self._last_obs is not None else self.game.get_state()
        cell = 12
        h, w = board.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = _color_for_value(int(board[y, x]))
        return img

    def close(self) -> None:
        pass
