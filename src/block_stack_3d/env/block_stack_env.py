from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_stack_3d.game import Action, BlockStackGame, GameConfig, GameState, TetrominoType


class BlockStackEnv(gym.Env):
    """Gymnasium wrapper around a single :class:`BlockStackGame`.

    One env step is one discrete :class:`Action`. Gravity is not applied
    between steps; agents drop pieces with SOFT_DROP or HARD_DROP.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000,
                 invalid_action_penalty: float = 0.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = BlockStackGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        w, h, d = self.game.grid.shape
        n_kinds = len(TetrominoType)

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(w, h, d), dtype=np.int8),
                # world block coordinates; -1 when there is no falling piece
                "piece": spaces.Box(low=-1, high=max(w, h, d), shape=(4, 3), dtype=np.int64),
                "piece_type": spaces.Discrete(n_kinds + 1),
                "next_type": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _piece_blocks(self) -> Optional[np.ndarray]:
        current = self.game.current_piece
        return None if current is None else current.world_blocks()

    def _get_obs(self) -> Dict[str, Any]:
        piece = np.full((4, 3), -1, dtype=np.int64)
        piece_type = 0
        current = self.game.current_piece
        if current is not None:
            piece = np.clip(current.world_blocks(), -1, None)
            piece_type = int(current.kind)
        return {
            "grid": self.game.grid.occupancy(),
            "piece": piece,
            "piece_type": piece_type,
            "next_type": int(self.game.next_piece.kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "pieces_placed": self.game.pieces_placed,
            "max_height": self.game.grid.get_max_height(),
            "filled_cells": self.game.grid.count_filled(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self.game.start_game()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = Action(int(action))
        reward_components: Dict[str, float] = {}

        placed_before = self.game.pieces_placed
        blocks_before = self._piece_blocks()
        _, gained, done, _ = self.game.step(action)
        reward_components["score"] = float(gained)
        unchanged = self.game.pieces_placed == placed_before and np.array_equal(blocks_before, self._piece_blocks())
        if action != Action.NONE and not done and unchanged:
            # blocked move or rotation
            reward_components["invalid"] = self.invalid_action_penalty

        self._steps += 1
        terminated = self.game.state is GameState.GAME_OVER
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        info = self._get_info()
        info["reward_components"] = reward_components
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        # Top-down height map, brighter means taller
        w, h, d = self.game.grid.shape
        heights = np.zeros((w, d), dtype=np.int64)
        for (x, y, z), _ in self.game.grid.occupied_cells():
            heights[x, z] = max(heights[x, z], y + 1)
        shade = (heights.astype(np.float64) / h * 200).astype(np.uint8)
        cell = 12
        img = np.zeros((d * cell, w * cell, 3), dtype=np.uint8)
        for x in range(w):
            for z in range(d):
                color = (30, 30, 36) if heights[x, z] == 0 else (55, 55 + int(shade[x, z]), 80)
                img[z * cell:(z + 1) * cell, x * cell:(x + 1) * cell, :] = color
        if self.game.current_piece is not None:
            for x, _, z in self.game.current_piece.world_blocks().tolist():
                if 0 <= x < w and 0 <= z < d:
                    img[z * cell:(z + 1) * cell, x * cell:(x + 1) * cell, :] = (240, 200, 60)
        return img

    def close(self) -> None:
        pass
