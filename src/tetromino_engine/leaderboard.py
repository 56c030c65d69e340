from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Callable, List

from tetromino_engine.game import GameEvent, TetrominoGame

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Anonymous"


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int


class HighScoreTable:
    """In-memory top-N table, highest score first."""

    def __init__(self, max_entries: int = 10) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: List[ScoreEntry] = []

    def record(self, name: str, score: int) -> bool:
        """Add an entry; return False when it is rejected or falls off the table."""
        if not isinstance(name, str) or isinstance(score, bool) or not isinstance(score, numbers.Integral):
            logger.warning("rejected invalid high score entry: name=%r score=%r", name, score)
            return False
        entry = ScoreEntry(name.strip() or DEFAULT_NAME, int(score))
        self._entries.append(entry)
        # sorted() is stable, so earlier entries win ties
        self._entries = sorted(self._entries, key=lambda e: e.score, reverse=True)[: self.max_entries]
        return any(e is entry for e in self._entries)

    def entries(self) -> List[ScoreEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []

    def attach(self, game: TetrominoGame, player_name: str) -> Callable[[], None]:
        def on_game_over(final_score: int) -> None:
            self.record(player_name, final_score)

        return game.events.subscribe(GameEvent.GAME_OVER, on_game_over)
