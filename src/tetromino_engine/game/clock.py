from __future__ import annotations

import logging

from .core import Phase, TetrominoGame
from .events import GameEvent

logger = logging.getLogger(__name__)


class GravityClock:
    """Turns elapsed host time into gravity ticks for one game.

    A single accumulator per game stands in for the interval timer, so there
    is never more than one pending tick schedule. It only accumulates while
    the game is running, restarts with every new session, and is rescheduled
    on every level change.
    """

    def __init__(self, game: TetrominoGame) -> None:
        self.game = game
        self.elapsed_ms = 0.0
        self._session_id = game.session_id
        self._unsubscribe = [
            game.events.subscribe(GameEvent.LEVEL_CHANGED, self._on_level_changed),
            game.events.subscribe(GameEvent.GAME_OVER, self._on_game_over),
        ]

    @property
    def interval_ms(self) -> int:
        return self.game.tick_interval_ms

    def reschedule(self) -> None:
        self.elapsed_ms = 0.0

    def _on_level_changed(self, level: int, tick_interval_ms: int) -> None:
        logger.debug("rescheduling gravity for level %d: %d ms", level, tick_interval_ms)
        self.reschedule()

    def _on_game_over(self, final_score: int) -> None:
        self.reschedule()

    def advance(self, elapsed_ms: float) -> int:
        """Account for `elapsed_ms` of host time and return the number of ticks applied."""
        if elapsed_ms < 0:
            raise ValueError("elapsed_ms must not be negative")
        if self.game.session_id != self._session_id:
            self._session_id = self.game.session_id
            self.reschedule()
        if self.game.phase != Phase.RUNNING:
            return 0

        self.elapsed_ms += elapsed_ms
        ticks = 0
        while self.game.phase == Phase.RUNNING and self.elapsed_ms >= self.interval_ms:
            self.elapsed_ms -= self.interval_ms
            # A level change inside tick() zeroes elapsed_ms, which ends the loop.
            self.game.tick()
            ticks += 1
        return ticks

    def close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
