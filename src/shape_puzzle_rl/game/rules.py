from __future__ import annotations

from dataclasses import dataclass
from typing import Collection


@dataclass
class ScoringRules:
    line_score: int = 100
    combo_bonus: int = 50

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        # Every line beyond the first in one clear earns the combo bonus.
        return self.line_score * lines + self.combo_bonus * max(lines - 1, 0)

    def score_delta(self, rows: Collection[int], columns: Collection[int]) -> int:
        return self.score_for_lines(len(rows) + len(columns))
