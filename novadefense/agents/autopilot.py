from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..sim.entities import Rocket
    from ..sim.sim import Sim


class AutopilotPolicy:
    """
    Simple baseline player (cheats by reading sim state).

    Behavior:
    - Click destroyed assets to start their repair.
    - Fire at the lowest unclaimed rocket, leading it by the interceptor flight time.
      A claim lapses after `claim_seconds` so a miss gets another shot.
    - Raise shields on idle batteries when nothing needs shooting.
    - Optional handicap: only act every `fire_interval` seconds.
    """

    def __init__(
        self, fire_interval: float = 0.25, use_shields: bool = True, lead: bool = True, claim_seconds: float = 1.5
    ):
        self.fire_interval = float(fire_interval)
        self.use_shields = bool(use_shields)
        self.lead = bool(lead)
        self.claim_seconds = float(claim_seconds)
        self._cooldown = 0.0
        self._claimed: dict[str, float] = {}

    def reset(self) -> None:
        self._cooldown = 0.0
        self._claimed.clear()

    def act(self, sim: Sim, dt: float) -> list[tuple[float, float]]:
        """Return pointer events (field coordinates) to send this frame."""
        state = sim.state
        if state is None or not state.playing:
            return []

        clicks: list[tuple[float, float]] = []
        for asset in [*state.cities, *state.batteries]:
            if asset.destroyed and not asset.repairing:
                clicks.append((float(asset.pos[0]), float(asset.pos[1])))

        live = {r.entity_id for r in state.rockets if r.alive}
        self._claimed = {rid: left - dt for rid, left in self._claimed.items() if rid in live and left - dt > 0.0}
        self._cooldown = max(0.0, self._cooldown - dt)
        if self._cooldown > 0.0:
            return clicks

        candidates = [r for r in state.rockets if r.alive and r.entity_id not in self._claimed]
        shooters = [b for b in state.batteries if b.can_fire]
        if shooters:
            # Lowest rocket is the most urgent. A lead point over an asset would
            # be read as a repair/shield click, so try the next rocket instead.
            for rocket in sorted(candidates, key=lambda r: float(r.pos[1]), reverse=True):
                aim = self._aim_point(sim, rocket, shooters)
                if self._inside_asset(sim, aim):
                    continue
                clicks.append(aim)
                self._claimed[rocket.entity_id] = self.claim_seconds
                self._cooldown = self.fire_interval
                return clicks

        if self.use_shields:
            for battery in state.batteries:
                if not battery.destroyed and not battery.shield_active and not battery.shield_charging:
                    clicks.append((float(battery.pos[0]), float(battery.pos[1])))
                    self._cooldown = self.fire_interval
                    break
        return clicks

    def _aim_point(self, sim: Sim, rocket: Rocket, shooters: list) -> tuple[float, float]:
        if not self.lead:
            return float(rocket.pos[0]), float(rocket.pos[1])
        shooter = min(shooters, key=lambda b: abs(float(b.pos[0]) - float(rocket.pos[0])))
        delta = rocket.target - rocket.pos
        dist = float(np.linalg.norm(delta))
        vel = np.zeros(2) if dist <= 1e-6 else delta / dist * rocket.speed
        flight = float(np.linalg.norm(rocket.pos - shooter.pos)) / sim.rules.missile_speed
        lead = min(flight * rocket.speed, dist)
        aim = rocket.pos + (vel / max(rocket.speed, 1e-6)) * lead
        return float(aim[0]), float(aim[1])

    def _inside_asset(self, sim: Sim, point: tuple[float, float]) -> bool:
        state = sim.state
        assert state is not None
        x, y = point
        return any(a.contains(x, y) for a in [*state.cities, *state.batteries])
