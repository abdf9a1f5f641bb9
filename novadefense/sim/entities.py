from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from ..constants import SMOKE_FADE_RATE, SMOKE_JITTER, SMOKE_RISE_RATE

if TYPE_CHECKING:
    from collections.abc import Mapping


class EntityKind(str, Enum):
    ROCKET = "rocket"
    MISSILE = "missile"
    EXPLOSION = "explosion"
    SMOKE = "smoke"


class BlastSource(str, Enum):
    MISSILE = "missile"  # player-fired interceptor
    TRACKING = "tracking"  # bonus interceptor
    IMPACT = "impact"  # rocket reaching the ground
    SHIELD = "shield"  # shield deflecting a rocket


@dataclass
class Rocket:
    entity_id: str
    pos: np.ndarray  # float64[2]
    target: np.ndarray  # float64[2], captured at spawn and never re-resolved
    speed: float
    start_x: float
    alive: bool = True

    kind: ClassVar[EntityKind] = EntityKind.ROCKET


@dataclass
class Missile:
    entity_id: str
    origin: np.ndarray  # float64[2]
    pos: np.ndarray  # float64[2]
    target: np.ndarray  # float64[2], re-aimed each tick while tracking
    speed: float
    tracking: bool = False
    target_rocket_id: str | None = None
    alive: bool = True

    kind: ClassVar[EntityKind] = EntityKind.MISSILE


@dataclass
class Explosion:
    entity_id: str
    center: np.ndarray  # float64[2]
    max_radius: float
    growth_rate: float
    source: BlastSource = BlastSource.MISSILE
    radius: float = 0.0
    alive: bool = True

    kind: ClassVar[EntityKind] = EntityKind.EXPLOSION

    @property
    def tracking(self) -> bool:
        return self.source is BlastSource.TRACKING


@dataclass
class Smoke:
    entity_id: str
    pos: np.ndarray  # float64[2]
    opacity: float
    size: float
    alive: bool = True

    kind: ClassVar[EntityKind] = EntityKind.SMOKE


Entity = Rocket | Missile | Explosion | Smoke


def step_toward(pos: np.ndarray, target: np.ndarray, distance: float) -> np.ndarray:
    """Move `pos` up to `distance` along the straight line to `target`, never past it."""
    delta = target - pos
    remaining = float(np.linalg.norm(delta))
    if remaining <= distance or remaining <= 1e-12:
        return target.astype(np.float64, copy=True)
    return pos + delta * (distance / remaining)


def advance_rocket(rocket: Rocket, dt: float, arrival_eps: float) -> bool:
    """Advance one tick. Returns True when the rocket reached its target this tick."""
    if not rocket.alive:
        return False
    if float(np.linalg.norm(rocket.target - rocket.pos)) < arrival_eps:
        rocket.alive = False
        return True
    rocket.pos = step_toward(rocket.pos, rocket.target, rocket.speed * dt)
    return False


def advance_missile(
    missile: Missile, dt: float, arrival_eps: float, rockets_by_id: Mapping[str, Rocket]
) -> bool:
    """Advance one tick. Returns True when the missile detonates this tick.

    A tracking missile follows its bound rocket while that rocket is alive and
    keeps the last seen position once it is gone.
    """
    if not missile.alive:
        return False
    if missile.tracking and missile.target_rocket_id is not None:
        quarry = rockets_by_id.get(missile.target_rocket_id)
        if quarry is not None and quarry.alive:
            missile.target = quarry.pos.copy()

    if float(np.linalg.norm(missile.target - missile.pos)) < arrival_eps:
        missile.alive = False
        return True
    missile.pos = step_toward(missile.pos, missile.target, missile.speed * dt)
    return False


def advance_explosion(explosion: Explosion, dt: float) -> None:
    if not explosion.alive:
        return
    if explosion.radius >= explosion.max_radius:
        explosion.alive = False
        return
    explosion.radius = min(explosion.max_radius, explosion.radius + explosion.growth_rate * dt)


def advance_smoke(smoke: Smoke, dt: float, rng: np.random.Generator) -> None:
    if not smoke.alive:
        return
    smoke.pos = smoke.pos + np.array(
        [(float(rng.random()) - 0.5) * SMOKE_JITTER * dt, -SMOKE_RISE_RATE * dt], dtype=np.float64
    )
    smoke.opacity = max(0.0, smoke.opacity - SMOKE_FADE_RATE * dt)
    if smoke.opacity <= 0.0:
        smoke.alive = False


def xy(v: np.ndarray) -> list[float]:
    """JSON-ready [x, y] from a position vector."""
    return [float(v[0]), float(v[1])]


def _rocket_dict(r: Rocket) -> dict[str, Any]:
    return {
        "id": r.entity_id,
        "pos": xy(r.pos),
        "target": xy(r.target),
        "start_x": float(r.start_x),
        "speed": float(r.speed),
    }


def _missile_dict(m: Missile) -> dict[str, Any]:
    return {
        "id": m.entity_id,
        "origin": xy(m.origin),
        "pos": xy(m.pos),
        "target": xy(m.target),
        "tracking": bool(m.tracking),
    }


def _explosion_dict(e: Explosion) -> dict[str, Any]:
    return {
        "id": e.entity_id,
        "center": xy(e.center),
        "radius": float(e.radius),
        "max_radius": float(e.max_radius),
        "source": e.source.value,
    }


def _smoke_dict(s: Smoke) -> dict[str, Any]:
    return {"id": s.entity_id, "pos": xy(s.pos), "opacity": float(s.opacity), "size": float(s.size)}


_SERIALIZERS = {
    EntityKind.ROCKET: _rocket_dict,
    EntityKind.MISSILE: _missile_dict,
    EntityKind.EXPLOSION: _explosion_dict,
    EntityKind.SMOKE: _smoke_dict,
}


def entity_to_dict(entity: Entity) -> dict[str, Any]:
    """JSON-ready view of an entity for the presentation layer."""
    return _SERIALIZERS[entity.kind](entity)  # type: ignore[operator]
