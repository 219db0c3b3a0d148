from __future__ import annotations


class GameError(Exception):
    """Base class for the rule violations the board engine reports."""


class PieceDoesNotFit(GameError):
    """A piece was locked where it does not fit."""


class GameIsOver(GameError):
    """The session has ended; build a new game to keep playing."""


class GameIsPaused(GameError):
    """State-changing commands are disabled while the game is paused."""
