"""Gymnasium environments for Block Stack 3D."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .block_stack_env import BlockStackEnv

# Register default 10x20x10 environment
register(
    id="BlockStack3D-v0",
    entry_point="block_stack_3d.env.block_stack_env:BlockStackEnv",
)

__all__ = ["BlockStackEnv"]
