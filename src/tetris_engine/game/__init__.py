"""Game module for the falling-block engine.

Exports the core game engine and supporting classes:
- GameGrid: Locked-cell matrix, collision queries and row clearing
- Piece: Tetromino kind plus rotation index
- TetrominoKind: Enum of the seven piece kinds
- ScoringRules: Line-clear and drop scoring configuration
- GravityScheduler: Clocks that drive the engine's tick
- TetrisGame: Game state machine and render snapshot
"""

from .events import GameEvent
from .grid import COLUMNS, ROWS, GameGrid
from .pieces import KIND_COLORS, ROTATIONS, GridPoint, Piece, TetrominoKind, random_kind
from .rules import ScoringRules, gravity_interval, level_for_lines
from .scheduler import GravityScheduler, ManualGravityClock, ThreadedGravityClock
from .core import (
    Action,
    CellKind,
    CellState,
    GameConfig,
    Phase,
    TetrisGame,
)

__all__ = [
    "COLUMNS",
    "ROWS",
    "GameGrid",
    "GridPoint",
    "Piece",
    "TetrominoKind",
    "ROTATIONS",
    "KIND_COLORS",
    "random_kind",
    "ScoringRules",
    "gravity_interval",
    "level_for_lines",
    "GravityScheduler",
    "ManualGravityClock",
    "ThreadedGravityClock",
    "GameEvent",
    "TetrisGame",
    "GameConfig",
    "Phase",
    "Action",
    "CellKind",
    "CellState",
]
