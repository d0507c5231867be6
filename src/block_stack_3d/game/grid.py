from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

import numpy as np

from .pieces import Piece


logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int, int]

EMPTY = -1


class GameGrid:
    """Discrete 3D voxel grid for settled blocks.

    Cells are indexed ``[x, y, z]`` with ``y`` pointing up. Empty cells hold
    ``EMPTY``; occupied cells hold the packed color of the piece that settled
    there. Anything outside the grid counts as occupied.
    """

    def __init__(self, width: int = 10, height: int = 20, depth: int = 10) -> None:
        if min(width, height, depth) < 1:
            raise ValueError(f"grid dimensions must be >= 1, got {width}x{height}x{depth}")
        self.width = int(width)
        self.height = int(height)
        self.depth = int(depth)
        self.cells = np.full((self.width, self.height, self.depth), EMPTY, dtype=np.int32)

    @property
    def shape(self) -> Coordinate:
        return self.width, self.height, self.depth

    def reset(self) -> None:
        self.cells.fill(EMPTY)

    def is_in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def is_occupied(self, x: int, y: int, z: int) -> bool:
        if not self.is_in_bounds(x, y, z):
            return True
        return self.color_at(x, y, z) is not None

    def color_at(self, x: int, y: int, z: int) -> Optional[int]:
        if not self.is_in_bounds(x, y, z):
            return None
        value = int(self.cells[x, y, z])
        return None if value == EMPTY else value

    def add_piece(self, piece: Piece) -> int:
        """Write the piece's blocks into the grid and return how many landed.

        Blocks outside the grid are skipped with a warning; collision checks
        upstream should make that impossible.
        """
        written = 0
        for x, y, z in piece.world_blocks().tolist():
            if self.is_in_bounds(x, y, z):
                self.cells[x, y, z] = piece.color
                written += 1
            else:
                logger.warning("Attempted to add piece block out of bounds at (%d, %d, %d)", x, y, z)
        return written

    def is_layer_complete(self, y: int) -> bool:
        if y < 0 or y >= self.height:
            return False
        return bool(np.all(self.cells[:, y, :] != EMPTY))

    def clear_layer_and_shift_down(self, y: int) -> None:
        if y < 0 or y >= self.height:
            logger.warning("Attempted to clear invalid layer: %d", y)
            return
        self.cells[:, y:-1, :] = self.cells[:, y + 1:, :].copy()
        self.cells[:, -1, :] = EMPTY

    def check_and_clear_completed_layers(self) -> int:
        cleared = 0
        y = 0
        while y < self.height:
            if self.is_layer_complete(y):
                self.clear_layer_and_shift_down(y)
                cleared += 1
                # the layer above now sits at y; look at it again
                continue
            y += 1
        return cleared

    def occupied_cells(self) -> Iterator[Tuple[Coordinate, int]]:
        for x, y, z in np.argwhere(self.cells != EMPTY).tolist():
            yield (x, y, z), int(self.cells[x, y, z])

    def occupancy(self) -> np.ndarray:
        return (self.cells != EMPTY).astype(np.int8)

    def count_filled(self) -> int:
        return int(np.count_nonzero(self.cells != EMPTY))

    def get_max_height(self) -> int:
        filled_layers = np.where(np.any(self.cells != EMPTY, axis=(0, 2)))[0]
        if filled_layers.size == 0:
            return 0
        return int(filled_layers[-1]) + 1

    def clone_state(self) -> np.ndarray:
        """Read-only copy of the cell array for publishing to renderers."""
        state = self.cells.copy()
        state.setflags(write=False)
        return state
