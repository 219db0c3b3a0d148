from __future__ import annotations

from typing import Callable, List, Sequence

import pytest

from falling_blocks.game import FallingBlocksGame, GameConfig, Shape


class ScriptedRng:
    """Stands in for random.Random: hands out a fixed list of picks, then the first option."""

    def __init__(self, picks: Sequence[Shape]) -> None:
        self.picks: List[Shape] = list(picks)

    def choice(self, seq):
        if self.picks:
            return self.picks.pop(0)
        return seq[0]


@pytest.fixture
def make_game() -> Callable[..., FallingBlocksGame]:
    def factory(*shapes: Shape, paused: bool = False, **config) -> FallingBlocksGame:
        game = FallingBlocksGame(GameConfig(**config), rng=ScriptedRng(shapes))
        game.paused = paused
        return game

    return factory
