from __future__ import annotations

import logging
import random
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces
from gymnasium.utils import seeding

from falling_blocks.game import PALETTE, CellColor, FallingBlocksGame, GameConfig, GameError, Shape, hard_drop


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class FallingBlocksEnv(gym.Env):
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 gravity_every: int = 1,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.gravity_every = max(1, int(gravity_every))
        self.max_episode_steps = int(max_episode_steps)
        if self.config.random_seed is not None:
            self.np_random, _ = seeding.np_random(self.config.random_seed)
        self.game = self._new_game()

        height, width = self.config.height, self.config.width
        n_colors = len(CellColor) - 1

        # Locked cells hold their color, the falling piece is negated.
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-n_colors, high=n_colors, shape=(height, width), dtype=np.int8),
                "active_shape": spaces.Discrete(len(Shape)),
                "next_shape": spaces.Discrete(len(Shape)),
            }
        )
        self.action_space = spaces.Discrete(len(Action))
        self._steps = 0

    def _new_game(self) -> FallingBlocksGame:
        # Piece order follows np_random, so unseeded resets continue the seeded stream.
        rng = random.Random(int(self.np_random.integers(2**31)))
        game = FallingBlocksGame(self.config, rng=rng)
        game.paused = False
        return game

    def _get_obs(self) -> Dict[str, Any]:
        grid = self.game.grid.astype(np.int8)
        piece = self.game.active_piece
        for x, y in piece.blocks:
            if 0 <= x < self.game.width and 0 <= y < self.game.height:
                grid[y, x] = -int(piece.color)
        return {
            "grid": grid,
            "active_shape": int(piece.shape),
            "next_shape": int(self.game.next_piece.shape),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "rows_cleared_total": self.game.rows_cleared_total,
            "steps": self._steps,
            "filled_cells": self.game.filled_count(),
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game = self._new_game()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def _apply(self, action: Action) -> bool:
        """Run one command; returns True if the piece landed."""
        game = self.game
        if action == Action.LEFT:
            game.move_piece_left()
        elif action == Action.RIGHT:
            game.move_piece_right()
        elif action == Action.ROTATE:
            game.rotate_piece()
        elif action == Action.SOFT_DROP:
            return game.drop_piece_once()
        elif action == Action.HARD_DROP:
            hard_drop(game)
            return True
        return False

    def step(self, action: int):
        action = Action(int(action))
        rows_before = self.game.rows_cleared_total
        self._steps += 1

        if not self.game.game_over:
            try:
                landed = self._apply(action)
                if not landed and not self.game.game_over and self._steps % self.gravity_every == 0:
                    self.game.drop_piece_once()
            except GameError as exc:
                logger.debug("ignored %s on %s: %s", type(exc).__name__, action.name, exc)

        reward = float(self.game.rows_cleared_total - rows_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.composite_grid()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = PALETTE[int(grid[y, x])]
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
