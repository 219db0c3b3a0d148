from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import pygame

from falling_blocks.game import FallingBlocksGame, GameConfig, GameError, hard_drop
from .renderer import Renderer


logger = logging.getLogger(__name__)

GRAVITY_INTERVAL_MS = 1000

KEY_TO_COMMAND: Dict[int, Callable[[FallingBlocksGame], object]] = {
    pygame.K_LEFT: FallingBlocksGame.move_piece_left,
    pygame.K_RIGHT: FallingBlocksGame.move_piece_right,
    pygame.K_UP: FallingBlocksGame.rotate_piece,
    pygame.K_DOWN: FallingBlocksGame.drop_piece_once,
    pygame.K_SPACE: hard_drop,
}


def send(game: FallingBlocksGame, command: Callable[[FallingBlocksGame], object]) -> None:
    """Run a command, discarding pause/game-over rejections."""
    try:
        command(game)
    except GameError as exc:
        logger.debug("ignored %s: %s", type(exc).__name__, exc)


@dataclass
class PauseSources:
    """Pause requested by the player (P key) or by losing window focus.

    The game stays paused while either holds, so regaining focus does not
    undo a pause the player asked for.
    """

    user: bool = False
    focus_lost: bool = False

    def apply(self, game: FallingBlocksGame) -> None:
        game.paused = self.user or self.focus_lost

    def toggle_user(self, game: FallingBlocksGame) -> None:
        self.user = not self.user
        self.apply(game)

    def set_focus(self, game: FallingBlocksGame, focused: bool) -> None:
        self.focus_lost = not focused
        self.apply(game)


def new_game(seed: Optional[int]) -> FallingBlocksGame:
    game = FallingBlocksGame(GameConfig(random_seed=seed), rng=random.Random(seed))
    game.paused = False
    return game


def run(seed: Optional[int] = None, cell_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = new_game(seed)
        pauses = PauseSources()
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Falling Blocks")

        last_fall = pygame.time.get_ticks()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.WINDOWFOCUSLOST:
                    pauses.set_focus(game, False)
                elif event.type == pygame.WINDOWFOCUSGAINED:
                    pauses.set_focus(game, True)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        pauses.toggle_user(game)
                    elif event.key == pygame.K_r:
                        game = new_game(seed)
                        pauses.apply(game)
                        last_fall = pygame.time.get_ticks()
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            send(game, command)

            # Gravity
            now = pygame.time.get_ticks()
            if now - last_fall >= GRAVITY_INTERVAL_MS:
                send(game, FallingBlocksGame.drop_piece_once)
                last_fall = now

            renderer.draw(screen, game)
            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--log-level", type=str, default="WARNING")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run(seed=args.seed, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
