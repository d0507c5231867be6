"""Game module for Block Stack 3D.

Exports the core game engine and supporting classes:
- GameGrid: 3D voxel grid and layer clearing
- Piece: Tetromino piece with 3D quarter-turn rotations
- TetrominoType / Axis: Piece catalog and rotation axes
- is_valid_position / calculate_ghost_position: Collision checks
- ScoringRules: Line-clear scoring table
- BlockStackGame: Game session state machine
- FallTimer: Gravity timer for host loops
"""

from .grid import GameGrid
from .pieces import Axis, InvalidPieceType, Piece, TetrominoType
from .collision import calculate_ghost_position, is_valid_position
from .rules import ScoringRules
from .core import (
    MOVE_BACKWARD,
    MOVE_DOWN,
    MOVE_FORWARD,
    MOVE_LEFT,
    MOVE_RIGHT,
    Action,
    BlockStackGame,
    GameConfig,
    GameSnapshot,
    GameState,
)
from .timing import FallTimer, fall_interval_ms

__all__ = [
    "GameGrid",
    "Axis",
    "InvalidPieceType",
    "Piece",
    "TetrominoType",
    "calculate_ghost_position",
    "is_valid_position",
    "ScoringRules",
    "Action",
    "BlockStackGame",
    "GameConfig",
    "GameSnapshot",
    "GameState",
    "MOVE_BACKWARD",
    "MOVE_DOWN",
    "MOVE_FORWARD",
    "MOVE_LEFT",
    "MOVE_RIGHT",
    "FallTimer",
    "fall_interval_ms",
]
