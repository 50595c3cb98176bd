from __future__ import annotations

from dataclasses import dataclass


LINES_PER_LEVEL = 10
BASE_INTERVAL = 0.9
INTERVAL_STEP = 0.06
MIN_INTERVAL = 0.12


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    soft_drop_points: int = 1
    hard_drop_points: int = 2

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1] * level
        # No piece can fill more than four rows at once
        return 0


def level_for_lines(total_lines: int) -> int:
    return max(1, total_lines // LINES_PER_LEVEL + 1)


def gravity_interval(level: int) -> float:
    """Seconds between gravity ticks at `level`."""
    return max(MIN_INTERVAL, BASE_INTERVAL - (level - 1) * INTERVAL_STEP)


def format_interval(seconds: float) -> str:
    return f"{seconds:.2f}s"
