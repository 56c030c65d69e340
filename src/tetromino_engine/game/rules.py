from __future__ import annotations

import math
import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int, int] = (0, 40, 100, 300, 1200)
    hard_drop_points_per_row: int = 2

    def score_for_lines(self, lines: int, level: int) -> int:
        if lines <= 0:
            return 0
        index = min(lines, len(self.line_clear_scores) - 1)
        return self.line_clear_scores[index] * level

    def hard_drop_bonus(self, rows: int) -> int:
        return self.hard_drop_points_per_row * max(0, rows)


@dataclass(frozen=True)
class SpeedCurve:
    base_speed_ms: float = 1000
    speed_multiplier: float = 1.2
    min_speed_ms: float = 50

    def interval_ms(self, level: int) -> int:
        """Gravity interval: exponential decay per level, floored at `min_speed_ms`."""
        steps = max(0, level - 1)
        # compare in log space; the float power overflows long before levels run out
        if steps * math.log(self.speed_multiplier) >= math.log(self.base_speed_ms) - math.log(self.min_speed_ms):
            return max(1, int(self.min_speed_ms))
        try:
            speed = self.base_speed_ms / self.speed_multiplier ** steps
            return max(1, int(max(self.min_speed_ms, round(speed))))
        except (OverflowError, ZeroDivisionError):
            # multiplier below 1 slows the curve without bound
            return sys.maxsize


def level_for_lines(total_lines: int, lines_per_level: int) -> int:
    return total_lines // lines_per_level + 1
