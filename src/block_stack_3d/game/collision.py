"""Validity checks for pieces against the grid.

Collisions are ordinary outcomes here, reported as booleans rather than
raised, so the session can branch on them.
"""

from __future__ import annotations

from typing import Optional

from .grid import GameGrid
from .pieces import Piece


DOWN = (0, -1, 0)


def is_valid_position(grid: GameGrid, piece: Piece) -> bool:
    """True iff every block of ``piece`` is inside ``grid`` and on a free cell."""
    for x, y, z in piece.world_blocks().tolist():
        if not grid.is_in_bounds(x, y, z):
            return False
        if grid.is_occupied(x, y, z):
            return False
    return True


def calculate_ghost_position(grid: GameGrid, piece: Optional[Piece]) -> Optional[Piece]:
    """Project ``piece`` straight down to where it would come to rest."""
    if piece is None:
        return None
    ghost = piece.clone()
    while True:
        candidate = ghost.clone()
        candidate.move(DOWN)
        if not is_valid_position(grid, candidate):
            return ghost
        ghost = candidate
