from __future__ import annotations

from typing import Iterable

from tetromino_engine.game import GameConfig, TetrominoGame


class ScriptedRandomizer:
    """Cycles through a fixed list of type ids."""

    def __init__(self, ids: Iterable[int]) -> None:
        self.ids = list(ids)
        self.draws = 0
        self.refills = 0

    def refill(self) -> None:
        self.refills += 1

    def next(self) -> int:
        value = self.ids[self.draws % len(self.ids)]
        self.draws += 1
        return value


def scripted_game(ids: Iterable[int], **config) -> TetrominoGame:
    game = TetrominoGame(GameConfig(**config), randomizer=ScriptedRandomizer(ids))
    game.start_game()
    return game
