"""Gymnasium environments for the tetromino engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register default 10x20 environment (7 discrete actions)
register(
    id="Tetromino-10x20-v0",
    entry_point="tetromino_engine.env.tetromino_env:TetrominoEnv",
)

__all__ = ["Tetromino-10x20-v0"]
