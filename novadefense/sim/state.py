from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .entities import Explosion, Missile, Rocket, Smoke

if TYPE_CHECKING:
    from ..config import DifficultyConfig
    from .assets import Battery, City, GroundAsset

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class Outcome:
    won: bool
    intact: int  # cities + batteries still standing when the session ended
    score: int
    tick: int
    time_s: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": "won" if self.won else "lost",
            "intact": self.intact,
            "score": self.score,
            "tick": self.tick,
            "time_s": self.time_s,
        }


@dataclass
class SessionState:
    """Everything one playthrough owns. Built fresh on every session start."""

    difficulty: DifficultyConfig
    cities: list[City]
    batteries: list[Battery]

    rockets: list[Rocket] = field(default_factory=list)
    missiles: list[Missile] = field(default_factory=list)
    explosions: list[Explosion] = field(default_factory=list)
    smokes: list[Smoke] = field(default_factory=list)

    score: int = 0
    manual_kills: int = 0  # kills not credited to tracking blasts, since the last bonus
    spawn_timer: float = 0.0
    time_s: float = 0.0
    tick: int = 0
    status: SessionStatus = SessionStatus.PLAYING
    outcome: Outcome | None = None

    rockets_by_id: dict[str, Rocket] = field(default_factory=dict)
    cities_by_id: dict[str, City] = field(default_factory=dict)
    batteries_by_id: dict[str, Battery] = field(default_factory=dict)
    _ids: Iterator[int] = field(default_factory=itertools.count, repr=False)

    def __post_init__(self) -> None:
        self.cities_by_id = {c.asset_id: c for c in self.cities}
        self.batteries_by_id = {b.asset_id: b for b in self.batteries}
        self.rockets_by_id = {r.entity_id: r for r in self.rockets}

    @property
    def playing(self) -> bool:
        return self.status is SessionStatus.PLAYING

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    def add_rocket(self, rocket: Rocket) -> None:
        self.rockets.append(rocket)
        self.rockets_by_id[rocket.entity_id] = rocket

    def asset(self, asset_id: str) -> GroundAsset | None:
        return self.cities_by_id.get(asset_id) or self.batteries_by_id.get(asset_id)

    def live_assets(self) -> list[GroundAsset]:
        return [*(c for c in self.cities if not c.destroyed), *(b for b in self.batteries if not b.destroyed)]

    def intact_count(self) -> int:
        return len(self.live_assets())

    def all_batteries_destroyed(self) -> bool:
        return all(b.destroyed for b in self.batteries)

    def live_rockets(self) -> list[Rocket]:
        return [r for r in self.rockets if r.alive]

    def conclude(self, won: bool) -> dict[str, Any]:
        """Freeze the session in its terminal state and return the end event."""
        self.status = SessionStatus.WON if won else SessionStatus.LOST
        self.outcome = Outcome(
            won=won,
            intact=self.intact_count(),
            score=self.score,
            tick=self.tick,
            time_s=self.time_s,
        )
        logger.info(
            f"Session {self.status.value} at t={self.time_s:.2f}s: score={self.score} intact={self.outcome.intact}"
        )
        return {"type": "game_end", **self.outcome.to_dict()}

    def cull(self) -> None:
        self.rockets = [r for r in self.rockets if r.alive]
        self.missiles = [m for m in self.missiles if m.alive]
        self.explosions = [e for e in self.explosions if e.alive]
        self.smokes = [s for s in self.smokes if s.alive]
        self.rockets_by_id = {r.entity_id: r for r in self.rockets}
