"""Ground assets: cities and missile batteries.

Both carry a small destruction/repair state machine:

    INTACT --impact--> DESTROYED --repair command--> REPAIRING --progress 1--> INTACT

Batteries add an orthogonal shield sub-state that only exists while the
battery is standing:

    NONE --command--> CHARGING --progress 1--> ACTIVE --absorbs one impact--> NONE
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from ..constants import BATTERY_HIT_RADIUS, BATTERY_REST_ANGLE, CITY_HIT_RADIUS

if TYPE_CHECKING:
    from ..config import FieldConfig, LayoutConfig


class AssetState(str, Enum):
    INTACT = "intact"
    DESTROYED = "destroyed"
    REPAIRING = "repairing"


class ShieldState(str, Enum):
    NONE = "none"
    CHARGING = "charging"
    ACTIVE = "active"


def _accrue(progress: float, dt: float, seconds: float) -> float:
    return min(1.0, max(0.0, progress + dt / seconds))


@dataclass
class City:
    asset_id: str
    pos: np.ndarray  # float64[2]
    destroyed: bool = False
    repairing: bool = False
    repair_progress: float = 0.0  # [0, 1]
    hit_radius: float = CITY_HIT_RADIUS

    @property
    def state(self) -> AssetState:
        if not self.destroyed:
            return AssetState.INTACT
        return AssetState.REPAIRING if self.repairing else AssetState.DESTROYED

    def contains(self, x: float, y: float) -> bool:
        return abs(float(self.pos[0]) - x) < self.hit_radius and abs(float(self.pos[1]) - y) < self.hit_radius

    def destroy(self) -> bool:
        if self.destroyed:
            return False
        self.destroyed = True
        self.repairing = False
        self.repair_progress = 0.0
        return True

    def start_repair(self) -> bool:
        if self.state is not AssetState.DESTROYED:
            return False
        self.repairing = True
        self.repair_progress = 0.0
        return True

    def advance_repair(self, dt: float, seconds: float) -> bool:
        """Accrue repair progress. Returns True on the tick the city is rebuilt."""
        if not self.repairing:
            return False
        self.repair_progress = _accrue(self.repair_progress, dt, seconds)
        if self.repair_progress < 1.0:
            return False
        self.destroyed = False
        self.repairing = False
        self.repair_progress = 0.0
        return True


@dataclass
class Battery:
    asset_id: str
    pos: np.ndarray  # float64[2]
    ammo: int
    max_ammo: int
    destroyed: bool = False
    repairing: bool = False
    repair_progress: float = 0.0  # [0, 1]
    shield_active: bool = False
    shield_charging: bool = False
    shield_progress: float = 0.0  # [0, 1]
    angle: float = BATTERY_REST_ANGLE  # last aim, radians (cosmetic)
    hit_radius: float = BATTERY_HIT_RADIUS

    @property
    def state(self) -> AssetState:
        if not self.destroyed:
            return AssetState.INTACT
        return AssetState.REPAIRING if self.repairing else AssetState.DESTROYED

    @property
    def shield(self) -> ShieldState:
        if self.shield_active:
            return ShieldState.ACTIVE
        return ShieldState.CHARGING if self.shield_charging else ShieldState.NONE

    @property
    def can_fire(self) -> bool:
        return not self.destroyed and self.ammo > 0

    def contains(self, x: float, y: float) -> bool:
        return abs(float(self.pos[0]) - x) < self.hit_radius and abs(float(self.pos[1]) - y) < self.hit_radius

    def fire_at(self, x: float, y: float) -> bool:
        """Spend one round aimed at (x, y). Returns False if the battery cannot fire."""
        if not self.can_fire:
            return False
        self.ammo -= 1
        self.angle = math.atan2(y - float(self.pos[1]), x - float(self.pos[0]))
        return True

    def absorb_impact(self) -> bool:
        """Consume an active shield. Returns True if the hit was absorbed."""
        if self.destroyed or not self.shield_active:
            return False
        self.shield_active = False
        return True

    def destroy(self) -> bool:
        if self.destroyed:
            return False
        self.destroyed = True
        self.ammo = 0
        self.repairing = False
        self.repair_progress = 0.0
        self.shield_active = False
        self.shield_charging = False
        self.shield_progress = 0.0
        return True

    def start_repair(self) -> bool:
        if self.state is not AssetState.DESTROYED:
            return False
        self.repairing = True
        self.repair_progress = 0.0
        return True

    def advance_repair(self, dt: float, seconds: float) -> bool:
        """Accrue repair progress. Returns True on the tick the battery is back online."""
        if not self.repairing:
            return False
        self.repair_progress = _accrue(self.repair_progress, dt, seconds)
        if self.repair_progress < 1.0:
            return False
        self.destroyed = False
        self.repairing = False
        self.repair_progress = 0.0
        self.ammo = self.max_ammo
        return True

    def start_shield_charge(self) -> bool:
        if self.destroyed or self.shield is not ShieldState.NONE:
            return False
        self.shield_charging = True
        self.shield_progress = 0.0
        return True

    def advance_shield(self, dt: float, seconds: float) -> bool:
        """Accrue shield charge. Returns True on the tick the shield comes up."""
        if not self.shield_charging:
            return False
        self.shield_progress = _accrue(self.shield_progress, dt, seconds)
        if self.shield_progress < 1.0:
            return False
        self.shield_charging = False
        self.shield_active = True
        self.shield_progress = 0.0
        return True


GroundAsset = City | Battery


def build_cities(playfield: FieldConfig, layout: LayoutConfig) -> list[City]:
    y = playfield.height - layout.city_ground_offset
    return [
        City(
            asset_id=f"city_{i}",
            pos=np.array([float(x), y], dtype=np.float64),
            hit_radius=layout.city_hit_radius,
        )
        for i, x in enumerate(layout.city_xs)
    ]


def build_batteries(playfield: FieldConfig, layout: LayoutConfig) -> list[Battery]:
    y = playfield.height - layout.battery_ground_offset
    return [
        Battery(
            asset_id=spec.battery_id,
            pos=np.array([float(spec.x), y], dtype=np.float64),
            ammo=int(spec.max_ammo),
            max_ammo=int(spec.max_ammo),
            hit_radius=layout.battery_hit_radius,
        )
        for spec in layout.batteries
    ]


def asset_to_dict(asset: GroundAsset) -> dict:
    out: dict = {
        "id": asset.asset_id,
        "pos": [float(asset.pos[0]), float(asset.pos[1])],
        "state": asset.state.value,
        "repair_progress": float(asset.repair_progress),
    }
    if isinstance(asset, Battery):
        out.update(
            {
                "ammo": int(asset.ammo),
                "max_ammo": int(asset.max_ammo),
                "shield": asset.shield.value,
                "shield_progress": float(asset.shield_progress),
                "angle": float(asset.angle),
            }
        )
    return out
