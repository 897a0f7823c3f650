"""High-score persistence collaborator.

A single JSON key/value slot on disk. The engine never calls this; drivers
load once at start and hand `GameOver` notifications to `record`.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Iterable

from falling_blocks.game.events import Event, GameOver

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "high_score"


class HighScoreStore:
    def __init__(self, path: str, key: str = HIGH_SCORE_KEY) -> None:
        self.path = path
        self.key = key

    def load(self) -> int:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as exc:
            logger.warning("could not read high score from %s: %s", self.path, exc)
            return 0
        try:
            return max(0, int(data.get(self.key, 0)))
        except (AttributeError, TypeError, ValueError):
            logger.warning("ignoring malformed high score file %s", self.path)
            return 0

    def save(self, score: int) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump({self.key: int(score)}, fh)
        os.replace(tmp, self.path)
        logger.info("saved high score %d to %s", score, self.path)

    def record(self, events: Iterable[Event]) -> bool:
        """Persist the final score if a GameOver event carries a new high score."""
        for event in events:
            if isinstance(event, GameOver) and event.is_new_high_score:
                self.save(event.final_score)
                return True
        return False
