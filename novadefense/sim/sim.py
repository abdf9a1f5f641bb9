from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from ..config import DifficultyConfig, GameConfig, difficulty_config
from .assets import asset_to_dict, build_batteries, build_cities
from .collision import launch_missile, resolve_impact, resolve_interceptions, spawn_explosion
from .commands import Action, ActionKind, classify_pointer, select_battery
from .entities import (
    BlastSource,
    advance_explosion,
    advance_missile,
    advance_rocket,
    advance_smoke,
    entity_to_dict,
    xy,
)
from .spawner import Spawner
from .state import SessionState, SessionStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..config import Difficulty
    from .assets import GroundAsset

logger = logging.getLogger(__name__)


class Sim:
    """Frame-driven simulation core for one session at a time.

    `reset()` builds a fresh `SessionState`; `step(dt)` advances it by one tick and
    returns the tick's events. Pointer/command calls mutate the same state and must
    come from the same thread as `step`.
    """

    def __init__(self, config: GameConfig | None = None, rng: np.random.Generator | None = None):
        self.config = config or GameConfig()
        self.rules = self.config.rules
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.state: SessionState | None = None
        self.spawner = Spawner(self.config.playfield.width, self.rng)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def reset(self, difficulty: Difficulty | DifficultyConfig | str = "NORMAL") -> list[dict]:
        diff = difficulty if isinstance(difficulty, DifficultyConfig) else difficulty_config(difficulty)
        self.spawner = Spawner(self.config.playfield.width, self.rng)
        self.state = SessionState(
            difficulty=diff,
            cities=build_cities(self.config.playfield, self.config.layout),
            batteries=build_batteries(self.config.playfield, self.config.layout),
        )
        logger.info(
            f"Session started: difficulty={diff.name} cities={len(self.state.cities)} "
            f"batteries={len(self.state.batteries)}"
        )
        return [{"type": "ammo", "battery": b.asset_id, "ammo": b.ammo} for b in self.state.batteries]

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.IDLE if self.state is None else self.state.status

    def _require_playing(self) -> SessionState:
        if self.state is None or not self.state.playing:
            raise RuntimeError(f"step() requires a playing session (status={self.status.value})")
        return self.state

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def step(self, dt: float) -> list[dict]:
        state = self._require_playing()
        dt = float(dt)
        if dt < 0.0:
            raise ValueError(f"dt must be non-negative, got {dt}")

        state.tick += 1
        state.time_s += dt
        phases: tuple[Callable[[SessionState, float], list[dict]], ...] = (
            self._spawn_rockets,
            self._update_rockets,
            self._update_missiles,
            self._update_explosions,
            self._update_smoke,
            self._update_assets,
            self._resolve_interceptions,
        )
        events: list[dict] = []
        for phase in phases:
            events.extend(phase(state, dt))
            if not state.playing:
                break
        state.cull()
        return events

    def _spawn_rockets(self, state: SessionState, dt: float) -> list[dict]:
        state.spawn_timer += dt
        if not self.spawner.due(state.spawn_timer, state.difficulty):
            return []
        rocket = self.spawner.try_spawn(state.spawn_timer, state.difficulty, state.live_assets())
        state.spawn_timer = 0.0
        if rocket is None:
            return []
        state.add_rocket(rocket)
        return [
            {
                "type": "rocket_spawn",
                "rocket": rocket.entity_id,
                "pos": xy(rocket.pos),
                "target": xy(rocket.target),
                "speed": rocket.speed,
            }
        ]

    def _update_rockets(self, state: SessionState, dt: float) -> list[dict]:
        events: list[dict] = []
        for rocket in list(state.rockets):
            if not advance_rocket(rocket, dt, self.rules.rocket_arrival_eps):
                continue
            events.extend(resolve_impact(state, rocket.target, self.rules, self.rng))
            if not state.playing:
                break
        return events

    def _update_missiles(self, state: SessionState, dt: float) -> list[dict]:
        events: list[dict] = []
        for missile in list(state.missiles):
            if not advance_missile(missile, dt, self.rules.missile_arrival_eps, state.rockets_by_id):
                continue
            source = BlastSource.TRACKING if missile.tracking else BlastSource.MISSILE
            blast = spawn_explosion(state, missile.target, self.rules.missile_blast_radius, self.rules, source)
            events.append(
                {
                    "type": "missile_detonate",
                    "missile": missile.entity_id,
                    "explosion": blast.entity_id,
                    "tracking": missile.tracking,
                    "pos": xy(blast.center),
                }
            )
        return events

    def _update_explosions(self, state: SessionState, dt: float) -> list[dict]:
        for blast in state.explosions:
            advance_explosion(blast, dt)
        return []

    def _update_smoke(self, state: SessionState, dt: float) -> list[dict]:
        for smoke in state.smokes:
            advance_smoke(smoke, dt, self.rng)
        return []

    def _update_assets(self, state: SessionState, dt: float) -> list[dict]:
        events: list[dict] = []
        for city in state.cities:
            if city.advance_repair(dt, self.rules.city_repair_seconds):
                logger.debug(f"{city.asset_id} rebuilt")
                events.append({"type": "repair_complete", "asset": city.asset_id})
        for battery in state.batteries:
            if battery.advance_repair(dt, self.rules.battery_repair_seconds):
                logger.debug(f"{battery.asset_id} back online with {battery.ammo} rounds")
                events.append({"type": "repair_complete", "asset": battery.asset_id})
                events.append({"type": "ammo", "battery": battery.asset_id, "ammo": battery.ammo})
            if battery.advance_shield(dt, self.rules.shield_charge_seconds):
                logger.debug(f"{battery.asset_id} shield up")
                events.append({"type": "shield_ready", "battery": battery.asset_id})
        return events

    def _resolve_interceptions(self, state: SessionState, dt: float) -> list[dict]:
        return resolve_interceptions(state, self.rules, self.rng)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def handle_pointer(self, x: float, y: float) -> tuple[Action, list[dict]]:
        """Classify a pointer event and apply it. Ignored unless a session is playing."""
        if self.state is None or not self.state.playing:
            return Action(ActionKind.NONE, float(x), float(y)), []
        action = classify_pointer(float(x), float(y), self.state.cities, self.state.batteries)
        if action.kind in (ActionKind.REPAIR_CITY, ActionKind.REPAIR_BATTERY):
            assert action.asset_id is not None
            return action, self.start_repair(action.asset_id)
        if action.kind is ActionKind.CHARGE_SHIELD:
            assert action.asset_id is not None
            return action, self.start_shield(action.asset_id)
        if action.kind is ActionKind.FIRE:
            return action, self.fire(action.x, action.y)
        return action, []

    def fire(self, x: float, y: float) -> list[dict]:
        """Launch from the nearest standing battery with ammo. No-op if none qualifies."""
        state = self.state
        if state is None or not state.playing:
            return []
        battery = select_battery(float(x), state.batteries)
        if battery is None or not battery.fire_at(float(x), float(y)):
            return []
        missile = launch_missile(state, battery, np.array([x, y], dtype=np.float64), self.rules)
        return [
            {
                "type": "missile_launch",
                "battery": battery.asset_id,
                "missile": missile.entity_id,
                "pos": xy(missile.pos),
                "target": xy(missile.target),
            },
            {"type": "ammo", "battery": battery.asset_id, "ammo": battery.ammo},
        ]

    def start_repair(self, asset_id: str) -> list[dict]:
        state = self.state
        if state is None or not state.playing:
            return []
        asset = state.asset(asset_id)
        if asset is None or not asset.start_repair():
            return []
        logger.debug(f"Repair started on {asset_id}")
        return [{"type": "repair_started", "asset": asset_id}]

    def start_shield(self, battery_id: str) -> list[dict]:
        state = self.state
        if state is None or not state.playing:
            return []
        battery = state.batteries_by_id.get(battery_id)
        if battery is None or not battery.start_shield_charge():
            return []
        logger.debug(f"Shield charging on {battery_id}")
        return [{"type": "shield_charging", "battery": battery_id}]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def score(self) -> int:
        return 0 if self.state is None else self.state.score

    def ammo(self) -> dict[str, int]:
        if self.state is None:
            return {}
        return {b.asset_id: b.ammo for b in self.state.batteries}

    def intact_count(self) -> int:
        return 0 if self.state is None else self.state.intact_count()

    def live_assets(self) -> list[GroundAsset]:
        return [] if self.state is None else self.state.live_assets()

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the whole session for an external renderer."""
        state = self.state
        if state is None:
            return {"status": SessionStatus.IDLE.value}
        return {
            "status": state.status.value,
            "difficulty": state.difficulty.name,
            "t": float(state.time_s),
            "tick": int(state.tick),
            "score": int(state.score),
            "manual_kills": int(state.manual_kills),
            "field": [float(self.config.playfield.width), float(self.config.playfield.height)],
            "cities": [asset_to_dict(c) for c in state.cities],
            "batteries": [asset_to_dict(b) for b in state.batteries],
            "rockets": [entity_to_dict(r) for r in state.rockets],
            "missiles": [entity_to_dict(m) for m in state.missiles],
            "explosions": [entity_to_dict(e) for e in state.explosions],
            "smokes": [entity_to_dict(s) for s in state.smokes],
            "outcome": None if state.outcome is None else state.outcome.to_dict(),
        }
