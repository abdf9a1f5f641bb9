from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .assets import Battery, City


class ActionKind(str, Enum):
    REPAIR_CITY = "repair_city"
    REPAIR_BATTERY = "repair_battery"
    CHARGE_SHIELD = "charge_shield"
    FIRE = "fire"
    NONE = "none"  # fire requested but no battery can shoot


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    x: float
    y: float
    asset_id: str | None = None  # repaired/shielded asset, or the battery that fires


def select_battery(x: float, batteries: Sequence[Battery]) -> Battery | None:
    """Standing battery with ammo whose x is closest to `x` (first wins ties)."""
    best: Battery | None = None
    best_dist = float("inf")
    for battery in batteries:
        if not battery.can_fire:
            continue
        d = abs(float(battery.pos[0]) - x)
        if d < best_dist:
            best = battery
            best_dist = d
    return best


def classify_pointer(x: float, y: float, cities: Sequence[City], batteries: Sequence[Battery]) -> Action:
    """Map a field coordinate to the player's intent. First match wins:

    1. destroyed city under the pointer, not already repairing -> repair it
    2. destroyed battery under the pointer, not already repairing -> repair it
    3. standing battery under the pointer with no shield and no charge -> charge shield
    4. anything else -> fire from the nearest eligible battery (or nothing)
    """
    for city in cities:
        if city.destroyed and not city.repairing and city.contains(x, y):
            return Action(ActionKind.REPAIR_CITY, x, y, city.asset_id)
    for battery in batteries:
        if battery.destroyed and not battery.repairing and battery.contains(x, y):
            return Action(ActionKind.REPAIR_BATTERY, x, y, battery.asset_id)
    for battery in batteries:
        if (
            not battery.destroyed
            and not battery.shield_active
            and not battery.shield_charging
            and battery.contains(x, y)
        ):
            return Action(ActionKind.CHARGE_SHIELD, x, y, battery.asset_id)

    shooter = select_battery(x, batteries)
    if shooter is None:
        return Action(ActionKind.NONE, x, y)
    return Action(ActionKind.FIRE, x, y, shooter.asset_id)
