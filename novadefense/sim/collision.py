"""Blast/rocket interception, scoring, and ground-impact resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from ..constants import (
    SHIELD_BLAST_OFFSET_Y,
    SMOKE_OPACITY_MAX,
    SMOKE_OPACITY_MIN,
    SMOKE_SIZE_MAX,
    SMOKE_SIZE_MIN,
    SMOKE_SPREAD_X,
    SMOKE_SPREAD_Y,
)
from .entities import BlastSource, Explosion, Missile, Smoke, xy

if TYPE_CHECKING:
    from ..config import RulesConfig
    from .assets import Battery
    from .state import SessionState

logger = logging.getLogger(__name__)


def spawn_explosion(
    state: SessionState, center: np.ndarray, max_radius: float, rules: RulesConfig, source: BlastSource
) -> Explosion:
    blast = Explosion(
        entity_id=state.new_id("explosion"),
        center=np.asarray(center, dtype=np.float64).copy(),
        max_radius=float(max_radius),
        growth_rate=rules.explosion_growth_rate,
        source=source,
    )
    state.explosions.append(blast)
    return blast


def spawn_smoke_burst(state: SessionState, center: np.ndarray, count: int, rng: np.random.Generator) -> None:
    for _ in range(int(count)):
        offset = np.array(
            [(float(rng.random()) - 0.5) * SMOKE_SPREAD_X, (float(rng.random()) - 0.5) * SMOKE_SPREAD_Y],
            dtype=np.float64,
        )
        state.smokes.append(
            Smoke(
                entity_id=state.new_id("smoke"),
                pos=center + offset,
                opacity=float(rng.uniform(SMOKE_OPACITY_MIN, SMOKE_OPACITY_MAX)),
                size=float(rng.uniform(SMOKE_SIZE_MIN, SMOKE_SIZE_MAX)),
            )
        )


def launch_missile(
    state: SessionState,
    battery: Battery,
    target: np.ndarray,
    rules: RulesConfig,
    target_rocket_id: str | None = None,
) -> Missile:
    missile = Missile(
        entity_id=state.new_id("missile"),
        origin=battery.pos.copy(),
        pos=battery.pos.copy(),
        target=np.asarray(target, dtype=np.float64).copy(),
        speed=rules.missile_speed,
        tracking=target_rocket_id is not None,
        target_rocket_id=target_rocket_id,
    )
    state.missiles.append(missile)
    return missile


def award_tracking_bonus(state: SessionState, rules: RulesConfig, rng: np.random.Generator) -> list[dict]:
    """Every standing battery launches one free tracking missile at a random live rocket.

    With no rocket in the air the bonus is forfeited, not banked.
    """
    events: list[dict] = []
    for battery in state.batteries:
        if battery.destroyed:
            continue
        quarry_pool = state.live_rockets()
        if not quarry_pool:
            logger.debug(f"Tracking bonus for {battery.asset_id} forfeited: no live rockets")
            events.append({"type": "bonus_forfeited", "battery": battery.asset_id})
            continue
        quarry = quarry_pool[int(rng.integers(len(quarry_pool)))]
        missile = launch_missile(state, battery, quarry.pos, rules, target_rocket_id=quarry.entity_id)
        events.append(
            {
                "type": "bonus_tracking",
                "battery": battery.asset_id,
                "missile": missile.entity_id,
                "target": quarry.entity_id,
                "pos": xy(missile.pos),
            }
        )
    return events


def resolve_interceptions(state: SessionState, rules: RulesConfig, rng: np.random.Generator) -> list[dict]:
    """Test every live blast against every live rocket.

    A rocket dies at most once: after it is marked dead no other blast can claim
    it. The win condition is checked after every kill, so the session may end
    partway through this pass.
    """
    events: list[dict] = []
    for blast in state.explosions:
        if not blast.alive or blast.radius <= 0.0:
            continue
        for rocket in state.rockets:
            if not rocket.alive:
                continue
            if float(np.linalg.norm(blast.center - rocket.pos)) >= blast.radius:
                continue

            rocket.alive = False
            state.score += rules.score_per_rocket
            events.append(
                {
                    "type": "intercept",
                    "rocket": rocket.entity_id,
                    "explosion": blast.entity_id,
                    "source": blast.source.value,
                    "pos": xy(rocket.pos),
                }
            )

            if not blast.tracking:
                state.manual_kills += 1
                if state.manual_kills >= rules.tracking_bonus_kills:
                    state.manual_kills = 0
                    events.extend(award_tracking_bonus(state, rules, rng))

            events.append({"type": "score", "score": state.score})
            if state.score >= rules.win_score:
                events.append(state.conclude(won=True))
                return events
    return events


def resolve_impact(
    state: SessionState, point: np.ndarray, rules: RulesConfig, rng: np.random.Generator
) -> list[dict]:
    """Resolve a rocket arriving at `point` against every standing asset.

    A ground blast is always left at the impact point; it is larger when the hit
    destroyed something. Losing the last battery ends the session.
    """
    events: list[dict] = []
    x, y = float(point[0]), float(point[1])
    destroyed_any = False

    for city in state.cities:
        if city.destroyed or not city.contains(x, y):
            continue
        city.destroy()
        destroyed_any = True
        spawn_smoke_burst(state, city.pos, rules.smoke_burst_count, rng)
        events.append({"type": "asset_destroyed", "asset": city.asset_id, "kind": "city", "pos": xy(city.pos)})

    for battery in state.batteries:
        if battery.destroyed or not battery.contains(x, y):
            continue
        if battery.absorb_impact():
            flash = battery.pos + np.array([0.0, SHIELD_BLAST_OFFSET_Y], dtype=np.float64)
            spawn_explosion(state, flash, rules.shield_blast_radius, rules, BlastSource.SHIELD)
            events.append({"type": "shield_absorb", "battery": battery.asset_id, "pos": xy(battery.pos)})
            continue
        battery.destroy()
        destroyed_any = True
        spawn_smoke_burst(state, battery.pos, rules.smoke_burst_count, rng)
        events.append(
            {"type": "asset_destroyed", "asset": battery.asset_id, "kind": "battery", "pos": xy(battery.pos)}
        )
        events.append({"type": "ammo", "battery": battery.asset_id, "ammo": 0})

    radius = rules.impact_destroy_blast_radius if destroyed_any else rules.impact_blast_radius
    spawn_explosion(state, point, radius, rules, BlastSource.IMPACT)
    events.append({"type": "impact", "pos": [x, y], "destroyed": destroyed_any})

    if state.all_batteries_destroyed():
        events.append(state.conclude(won=False))
    return events
