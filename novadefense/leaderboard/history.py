"""File-based leaderboard storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..constants import LEADERBOARD_MAX_ENTRIES
from .records import LeaderboardEntry

logger = logging.getLogger(__name__)


class Leaderboard:
    """Best sessions, highest score first, persisted as one JSON file.

    Only the host writes here; the simulation core never reads it.
    """

    def __init__(self, path: Path, max_entries: int = LEADERBOARD_MAX_ENTRIES) -> None:
        self.path = Path(path)
        self.max_entries = max(1, int(max_entries))

    def entries(self) -> list[LeaderboardEntry]:
        if not self.path.exists():
            return []
        with open(self.path) as f:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Malformed leaderboard file {self.path}: {e}") from e
        if not isinstance(raw, list):
            raise ValueError(f"Malformed leaderboard file {self.path}: expected a list")
        try:
            return [LeaderboardEntry.from_dict(d) for d in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed leaderboard entry in {self.path}: {e}") from e

    def add(self, entry: LeaderboardEntry) -> list[LeaderboardEntry]:
        """Insert `entry`, keep the top `max_entries` by score, and save."""
        records = [*self.entries(), entry]
        # Stable sort: equal scores keep insertion order.
        records.sort(key=lambda r: r.score, reverse=True)
        records = records[: self.max_entries]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump([r.to_dict() for r in records], f, indent=2)
        logger.info(f"Leaderboard {self.path}: recorded {entry.rating} / {entry.score} ({len(records)} kept)")
        return records

    def top(self, limit: int = 10) -> list[LeaderboardEntry]:
        return self.entries()[:limit]

    def for_difficulty(self, difficulty: str) -> list[LeaderboardEntry]:
        return [r for r in self.entries() if r.difficulty == difficulty]
