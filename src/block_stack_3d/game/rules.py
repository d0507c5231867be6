from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int, int] = (0, 100, 300, 500, 800)
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if lines <= 0 or lines >= len(self.line_clear_scores):
            # a single tetromino spans at most four layers
            return 0
        return self.line_clear_scores[lines] * level

    def level_for_lines(self, lines_cleared: int) -> int:
        # Not applied automatically by the game; callers decide when to level up.
        return lines_cleared // self.lines_per_level + 1
