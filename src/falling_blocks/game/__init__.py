"""Game module for Falling Blocks.

Exports the board engine and supporting classes:
- GameGrid: Playfield, fit test, locking and row clearing
- Piece: Falling piece value with shape/rotation geometry
- Shape, Rotation, CellColor: Geometry enums
- GameConfig: Session configuration
- FallingBlocksGame: Board engine and session state
- hard_drop: Repeated drop-once until the piece lands
- PALETTE: RGB per cell color for renderers
- GameError and subclasses: Rule violations raised by the engine
"""

from .errors import GameError, GameIsOver, GameIsPaused, PieceDoesNotFit
from .grid import GameGrid, PlacementResult
from .pieces import PALETTE, CellColor, Piece, Rotation, Shape, random_shape, relative_blocks, shape_color, spawn_piece
from .core import FallingBlocksGame, GameConfig, GameState, hard_drop

__all__ = [
    "GameGrid",
    "PlacementResult",
    "Piece",
    "Shape",
    "Rotation",
    "CellColor",
    "relative_blocks",
    "shape_color",
    "random_shape",
    "spawn_piece",
    "GameConfig",
    "GameState",
    "FallingBlocksGame",
    "hard_drop",
    "PALETTE",
    "GameError",
    "PieceDoesNotFit",
    "GameIsOver",
    "GameIsPaused",
]
