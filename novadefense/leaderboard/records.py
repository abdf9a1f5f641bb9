"""Leaderboard record data structures."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from ..constants import RATING_FLOOR, RATING_THRESHOLDS


def rating_for(intact: int) -> str:
    """Letter grade from the number of assets still standing at the end."""
    for minimum, letter in RATING_THRESHOLDS:
        if intact >= minimum:
            return letter
    return RATING_FLOOR


@dataclass
class LeaderboardEntry:
    """One finished session."""

    difficulty: str
    score: int
    rating: str
    timestamp: float  # Unix epoch
    won: bool = False
    intact: int = 0

    @classmethod
    def from_outcome(
        cls, difficulty: str, score: int, intact: int, won: bool, timestamp: float | None = None
    ) -> LeaderboardEntry:
        return cls(
            difficulty=str(difficulty),
            score=int(score),
            rating=rating_for(intact),
            timestamp=time.time() if timestamp is None else float(timestamp),
            won=bool(won),
            intact=int(intact),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for JSON storage."""
        return {
            "difficulty": self.difficulty,
            "score": self.score,
            "rating": self.rating,
            "timestamp": self.timestamp,
            "won": self.won,
            "intact": self.intact,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LeaderboardEntry:
        """Deserialize from dict."""
        return cls(
            difficulty=d["difficulty"],
            score=int(d["score"]),
            rating=d["rating"],
            timestamp=float(d["timestamp"]),
            won=bool(d.get("won", False)),
            intact=int(d.get("intact", 0)),
        )
