from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from .collision import calculate_ghost_position, is_valid_position
from .grid import GameGrid
from .pieces import Axis, Piece, TetrominoType, Vector
from .rules import ScoringRules


logger = logging.getLogger(__name__)

MOVE_LEFT = (-1, 0, 0)
MOVE_RIGHT = (1, 0, 0)
MOVE_FORWARD = (0, 0, -1)
MOVE_BACKWARD = (0, 0, 1)
MOVE_DOWN = (0, -1, 0)


class GameState(Enum):
    START_SCREEN = "StartScreen"
    PLAYING = "Playing"
    PAUSED = "Paused"
    GAME_OVER = "GameOver"


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    FORWARD = 2
    BACKWARD = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    ROTATE_X_CCW = 6
    ROTATE_X_CW = 7
    ROTATE_Y_CCW = 8
    ROTATE_Y_CW = 9
    ROTATE_Z_CCW = 10
    ROTATE_Z_CW = 11
    NONE = 12


_ACTION_MOVES = {
    Action.LEFT: MOVE_LEFT,
    Action.RIGHT: MOVE_RIGHT,
    Action.FORWARD: MOVE_FORWARD,
    Action.BACKWARD: MOVE_BACKWARD,
    Action.SOFT_DROP: MOVE_DOWN,
}

_ACTION_ROTATIONS = {
    Action.ROTATE_X_CCW: (Axis.X, 1),
    Action.ROTATE_X_CW: (Axis.X, -1),
    Action.ROTATE_Y_CCW: (Axis.Y, 1),
    Action.ROTATE_Y_CW: (Axis.Y, -1),
    Action.ROTATE_Z_CCW: (Axis.Z, 1),
    Action.ROTATE_Z_CW: (Axis.Z, -1),
}


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    depth: int = 10
    random_seed: Optional[int] = None
    # Pivot for new pieces; defaults to just below the top, near the centre.
    spawn_position: Optional[Tuple[int, int, int]] = None

    def resolved_spawn_position(self) -> Tuple[int, int, int]:
        if self.spawn_position is not None:
            return self.spawn_position
        return self.width // 2 - 1, self.height - 3, self.depth // 2 - 1


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the session for renderers."""

    cells: np.ndarray
    dimensions: Tuple[int, int, int]
    state: GameState
    score: int
    level: int
    lines_cleared: int
    current_kind: Optional[TetrominoType]
    current_blocks: Optional[np.ndarray]
    current_color: Optional[int]
    ghost_blocks: Optional[np.ndarray]
    next_kind: TetrominoType
    next_shape: np.ndarray
    next_color: int


def _frozen(array: np.ndarray) -> np.ndarray:
    array = array.copy()
    array.setflags(write=False)
    return array


class BlockStackGame:
    """One play session: grid, current and next pieces, counters and state.

    The session is the only thing that mutates the grid and pieces. Outside
    code issues commands and reads :meth:`snapshot`.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height, self.config.depth)
        self.current_piece: Optional[Piece] = None
        self.next_piece: Piece = self._random_piece()
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.pieces_placed = 0
        self.state = GameState.START_SCREEN

    def reset(self, seed: Optional[int] = None) -> None:
        """Back to the start screen with a fresh grid and counters."""
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.current_piece = None
        self.next_piece = self._random_piece()
        self._reset_counters()
        self.state = GameState.START_SCREEN

    def _reset_counters(self) -> None:
        self.score = 0
        self.level = 1
        self.lines_cleared = 0
        self.pieces_placed = 0

    def _random_piece(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return Piece(kind, self.config.resolved_spawn_position())

    @property
    def is_playing(self) -> bool:
        return self.state is GameState.PLAYING

    # --- state transitions -------------------------------------------------

    def start_game(self) -> None:
        if self.state not in (GameState.START_SCREEN, GameState.GAME_OVER):
            return
        logger.debug("Starting game")
        self.grid.reset()
        self.current_piece = self.next_piece
        self.next_piece = self._random_piece()
        self._reset_counters()
        self.state = GameState.PLAYING
        if not is_valid_position(self.grid, self.current_piece):
            logger.warning("Initial spawn of %r is blocked; ending game", self.current_piece)
            self.end_game()

    def pause_game(self) -> None:
        if self.state is GameState.PLAYING:
            self.state = GameState.PAUSED

    def resume_game(self) -> None:
        if self.state is GameState.PAUSED:
            self.state = GameState.PLAYING

    def end_game(self) -> None:
        if self.state not in (GameState.PLAYING, GameState.PAUSED):
            return
        logger.debug("Game over with score %d", self.score)
        self.state = GameState.GAME_OVER
        self.current_piece = None

    def set_level(self, level: int) -> None:
        if level < 1:
            raise ValueError(f"level must be >= 1, got {level}")
        self.level = int(level)

    # --- piece commands ----------------------------------------------------

    def move_piece(self, offset: Vector) -> bool:
        if not self.is_playing or self.current_piece is None:
            return False
        moved = self.current_piece.clone()
        moved.move(offset)
        if is_valid_position(self.grid, moved):
            self.current_piece = moved
            return True
        if offset[1] < 0:
            # a blocked fall means the piece has landed
            self.settle_piece()
        return False

    def rotate_piece(self, axis: Axis, direction: int = 1) -> bool:
        if not self.is_playing or self.current_piece is None:
            return False
        rotated = self.current_piece.clone()
        rotated.rotate(axis, direction)
        if is_valid_position(self.grid, rotated):
            self.current_piece = rotated
            return True
        logger.debug("Rotation about %s blocked", Axis(axis).name)
        return False

    def drop_piece(self) -> int:
        """Hard drop: move to the ghost position and settle. Returns rows fallen."""
        if not self.is_playing or self.current_piece is None:
            return 0
        ghost = calculate_ghost_position(self.grid, self.current_piece)
        rows = int(round(self.current_piece.position[1] - ghost.position[1]))
        self.current_piece = ghost
        self.settle_piece()
        return rows

    def tick(self) -> bool:
        """Gravity step; only acts if the game is still playing when called."""
        if not self.is_playing:
            return False
        return self.move_piece(MOVE_DOWN)

    def ghost_piece(self) -> Optional[Piece]:
        return calculate_ghost_position(self.grid, self.current_piece)

    # --- settle / spawn ----------------------------------------------------

    def calculate_score(self, lines: int) -> int:
        return self.rules.score_for_lines(lines, self.level)

    def settle_piece(self) -> int:
        if self.current_piece is None:
            return 0
        self.grid.add_piece(self.current_piece)
        self.pieces_placed += 1
        lines = self.grid.check_and_clear_completed_layers()
        self.score += self.calculate_score(lines)
        self.lines_cleared += lines
        if lines:
            logger.debug("Cleared %d layer(s); score now %d", lines, self.score)
        self.current_piece = None
        self.spawn_new_piece()
        return lines

    def spawn_new_piece(self) -> bool:
        if self.state not in (GameState.PLAYING, GameState.PAUSED):
            return False
        candidate = self.next_piece
        upcoming = self._random_piece()
        if not is_valid_position(self.grid, candidate):
            logger.warning("Spawn position for %r is blocked; ending game", candidate)
            self.end_game()
            return False
        self.current_piece = candidate
        self.next_piece = upcoming
        return True

    # --- published state ---------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        current = self.current_piece
        ghost = self.ghost_piece()
        return GameSnapshot(
            cells=self.grid.clone_state(),
            dimensions=self.grid.shape,
            state=self.state,
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            current_kind=current.kind if current is not None else None,
            current_blocks=_frozen(current.world_blocks()) if current is not None else None,
            current_color=current.color if current is not None else None,
            ghost_blocks=_frozen(ghost.world_blocks()) if ghost is not None else None,
            next_kind=self.next_piece.kind,
            next_shape=_frozen(self.next_piece.base_shape),
            next_color=self.next_piece.color,
        )

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        """Apply one discrete action; returns (occupancy, score delta, done, info)."""
        if self.state is GameState.GAME_OVER:
            return self.get_state(), 0, True, {}
        score_before = self.score
        action = Action(action)
        if action in _ACTION_MOVES:
            self.move_piece(_ACTION_MOVES[action])
        elif action in _ACTION_ROTATIONS:
            axis, direction = _ACTION_ROTATIONS[action]
            self.rotate_piece(axis, direction)
        elif action == Action.HARD_DROP:
            self.drop_piece()
        info = {
            "score": self.score,
            "lines_cleared": self.lines_cleared,
            "pieces_placed": self.pieces_placed,
        }
        return self.get_state(), self.score - score_before, self.state is GameState.GAME_OVER, info

    def get_state(self) -> np.ndarray:
        """Occupancy grid with the falling piece overlaid as -1."""
        state = self.grid.occupancy()
        if self.current_piece is not None:
            for x, y, z in self.current_piece.world_blocks().tolist():
                if self.grid.is_in_bounds(x, y, z):
                    state[x, y, z] = -1
        return state
