from __future__ import annotations

from dataclasses import dataclass

LINES_PER_LEVEL = 10


def level_for_lines(total_lines: int) -> int:
    return total_lines // LINES_PER_LEVEL + 1


@dataclass(frozen=True)
class ScoringRules:
    lock_bonus: int = 10
    line_clear_base: int = 100
    hard_drop_per_row: int = 2
    base_interval: float = 1000.0
    decay_factor: float = 0.9
    min_interval: float = 100.0

    def __post_init__(self) -> None:
        if self.lock_bonus <= 0 or self.line_clear_base <= 0:
            raise ValueError("lock_bonus and line_clear_base must be positive")
        if self.hard_drop_per_row < 0:
            raise ValueError(f"hard_drop_per_row must not be negative, got {self.hard_drop_per_row}")
        if self.base_interval <= 0 or self.min_interval <= 0:
            raise ValueError("drop intervals must be positive")
        if not 0 < self.decay_factor <= 1:
            raise ValueError(f"decay_factor must be in (0, 1], got {self.decay_factor}")

    def score_for_lock(self, lines: int, level: int, hard_drop_rows: int = 0) -> int:
        """Points for one lock; `level` is the level before this lock counts."""
        return (
            self.lock_bonus
            + self.line_clear_base * level * max(0, lines)
            + self.hard_drop_per_row * max(0, hard_drop_rows)
        )

    def drop_interval(self, level: int) -> float:
        # Advisory gravity period for the driver, floored at min_interval
        return max(self.min_interval, self.base_interval * self.decay_factor ** (level - 1))
