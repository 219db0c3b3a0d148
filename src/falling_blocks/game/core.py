from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from .errors import GameIsOver, GameIsPaused
from .grid import GameGrid
from .pieces import Piece, Shape, random_shape, spawn_piece


logger = logging.getLogger(__name__)

Listener = Callable[["FallingBlocksGame"], None]


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    spawn_x: int = 4
    spawn_y: int = 0
    random_seed: Optional[int] = None
    # -1 steps rotation 0 -> 270 -> 180 -> 90, +1 steps the other way.
    rotation_step: int = -1
    start_paused: bool = True
    # Lock-out: pieces that lock partly above the top row also end the game.
    lock_out_ends_game: bool = False

    def __post_init__(self) -> None:
        if self.rotation_step not in (-1, 1):
            raise ValueError(f"rotation_step must be -1 or 1, got {self.rotation_step}")


@dataclass(frozen=True)
class GameState:
    """Read-only snapshot of a session for renderers and agents."""

    grid: np.ndarray
    active_piece: Piece
    next_piece: Piece
    game_over: bool
    paused: bool
    rows_cleared_total: int


class FallingBlocksGame:
    """Board engine: the single owner and mutator of a game session.

    Commands either apply completely or leave the state untouched. A move or
    rotation blocked by a wall or the stack is a silent no-op that returns
    False; commands issued while paused or after game over raise.
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.random_seed)
        self._grid = GameGrid(self.config.width, self.config.height)
        self._game_over = False
        self._paused = self.config.start_paused
        self.rows_cleared_total = 0
        self._listeners: List[Listener] = []
        self._active_piece = self._random_piece()
        self._next_piece = self._random_piece()

    # Observed state

    @property
    def active_piece(self) -> Piece:
        return self._active_piece

    @property
    def next_piece(self) -> Piece:
        return self._next_piece

    @property
    def grid(self) -> np.ndarray:
        grid = self._grid.clone_state()
        grid.setflags(write=False)
        return grid

    @property
    def width(self) -> int:
        return self._grid.width

    @property
    def height(self) -> int:
        return self._grid.height

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        value = bool(value)
        if value == self._paused:
            return
        self._paused = value
        logger.debug("game %s", "paused" if value else "resumed")
        self._notify()

    def fits(self, piece: Piece) -> bool:
        return self._grid.fits(piece.blocks)

    def get_state(self) -> GameState:
        return GameState(
            grid=self.grid,
            active_piece=self._active_piece,
            next_piece=self._next_piece,
            game_over=self._game_over,
            paused=self._paused,
            rows_cleared_total=self.rows_cleared_total,
        )

    def filled_count(self) -> int:
        return self._grid.filled_count()

    def composite_grid(self) -> np.ndarray:
        """Playfield with the active piece drawn in, for display."""
        state = self._grid.clone_state()
        for x, y in self._active_piece.blocks:
            if 0 <= x < self.width and 0 <= y < self.height:
                state[y, x] = int(self._active_piece.color)
        return state

    # Listeners

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # Commands

    def rotate_piece(self) -> bool:
        self._check_playable()
        return self._try_replace(self._active_piece.rotated(self.config.rotation_step))

    def move_piece_left(self) -> bool:
        self._check_playable()
        return self._try_replace(self._active_piece.moved(dx=-1))

    def move_piece_right(self) -> bool:
        self._check_playable()
        return self._try_replace(self._active_piece.moved(dx=1))

    def drop_piece_once(self) -> bool:
        """Move the active piece down one row, locking it if it cannot move.

        Returns True when the piece landed and the next piece took its place.
        """
        self._check_playable()
        if self._try_replace(self._active_piece.moved(dy=1)):
            return False
        self._lock_active_piece()
        return True

    # Internals

    def _check_playable(self) -> None:
        if self._paused:
            raise GameIsPaused("game is paused")
        if self._game_over:
            raise GameIsOver("game is over")

    def _try_replace(self, candidate: Piece) -> bool:
        if not self.fits(candidate):
            return False
        self._active_piece = candidate
        self._notify()
        return True

    def _lock_active_piece(self) -> None:
        landed = self._active_piece
        result = self._grid.lock(landed.blocks, landed.color)
        self.rows_cleared_total += result.rows_cleared
        logger.debug("locked %s at (%d, %d) rotation %s", landed.shape.name, landed.x, landed.y, landed.rotation.name)
        if result.rows_cleared:
            logger.debug("cleared %d row(s)", result.rows_cleared)

        topped_out = self.config.lock_out_ends_game and result.cells_above_top > 0
        if topped_out or not self.fits(self._next_piece):
            self._game_over = True
            logger.info("game over after %d cleared row(s)", self.rows_cleared_total)

        self._active_piece = self._next_piece
        self._next_piece = self._random_piece(avoid=(landed.shape, self._active_piece.shape))
        self._notify()

    def _random_piece(self, avoid: Sequence[Shape] = ()) -> Piece:
        shape = random_shape(self.rng, avoid)
        return spawn_piece(shape, self.config.spawn_x, self.config.spawn_y)


def hard_drop(game: FallingBlocksGame) -> int:
    """Drop the active piece until it lands; returns rows it fell."""
    fallen = 0
    while not game.drop_piece_once():
        fallen += 1
    return fallen

