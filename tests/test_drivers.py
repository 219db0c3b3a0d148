from __future__ import annotations

import os
import subprocess
import sys

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from falling_blocks.game import PALETTE, CellColor, FallingBlocksGame, GameConfig
from falling_blocks.rl.random_agent import run_random
from falling_blocks.visualization.human_play import KEY_TO_COMMAND, PauseSources, new_game, send
from falling_blocks.visualization.renderer import Renderer


def test_send_discards_rejected_commands():
    game = FallingBlocksGame(GameConfig())
    before = game.active_piece
    send(game, FallingBlocksGame.drop_piece_once)
    assert game.active_piece == before


def test_send_runs_command_when_playable():
    game = new_game(seed=4)
    assert not game.paused
    y = game.active_piece.y
    send(game, KEY_TO_COMMAND[pygame.K_DOWN])
    assert game.active_piece.y == y + 1


def test_space_hard_drops():
    game = new_game(seed=4)
    upcoming = game.next_piece
    send(game, KEY_TO_COMMAND[pygame.K_SPACE])
    assert game.active_piece == upcoming


def test_renderer_draws_board_and_preview():
    game = new_game(seed=2)
    renderer = Renderer(cell_size=10, margin=5)
    width, height = renderer.window_size(game)
    assert (width, height) == (5 * 3 + 14 * 10, 5 * 2 + 20 * 10)

    surface = pygame.Surface((width, height))
    renderer._draw_board(surface, game)
    renderer._draw_preview(surface, game)

    x, y = game.active_piece.blocks[0]
    color = surface.get_at((5 + x * 10 + 1, 5 + y * 10 + 1))
    assert tuple(color)[:3] == renderer_color(game.active_piece.color)

    preview_x0 = 5 * 2 + game.width * 10
    dx, dy = game.next_piece.relative_blocks[0]
    color = surface.get_at((preview_x0 + (dx + 1) * 10 + 1, 5 * 2 + dy * 10 + 1))
    assert tuple(color)[:3] == renderer_color(game.next_piece.color)


def renderer_color(color: CellColor):
    return PALETTE[int(color)]


def test_random_agent_runs():
    total = run_random(steps=300, seed=0)
    assert total >= 0.0


def test_focus_regained_keeps_player_pause():
    game = new_game(seed=1)
    pauses = PauseSources()
    pauses.toggle_user(game)
    assert game.paused
    pauses.set_focus(game, False)
    pauses.set_focus(game, True)
    assert game.paused
    pauses.toggle_user(game)
    assert not game.paused


def test_focus_loss_pause_is_lifted_on_return():
    game = new_game(seed=1)
    pauses = PauseSources()
    pauses.set_focus(game, False)
    assert game.paused
    pauses.toggle_user(game)
    pauses.toggle_user(game)
    assert game.paused
    pauses.set_focus(game, True)
    assert not game.paused


def test_player_does_not_need_gymnasium():
    code = (
        "import sys\n"
        "import falling_blocks.visualization.human_play\n"
        "print('gymnasium' in sys.modules)\n"
    )
    env = dict(os.environ, SDL_VIDEODRIVER="dummy", PYTHONPATH=os.pathsep.join(sys.path))
    out = subprocess.run([sys.executable, "-c", code], env=env, capture_output=True, text=True, check=True)
    assert out.stdout.strip().splitlines()[-1] == "False"
