from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    BATTERY_GROUND_OFFSET,
    BATTERY_HIT_RADIUS,
    BATTERY_REPAIR_SECONDS,
    CITY_GROUND_OFFSET,
    CITY_HIT_RADIUS,
    CITY_REPAIR_SECONDS,
    EXPLOSION_GROWTH_RATE,
    FIELD_HEIGHT,
    FIELD_WIDTH,
    IMPACT_BLAST_RADIUS,
    IMPACT_DESTROY_BLAST_RADIUS,
    MISSILE_ARRIVAL_EPS,
    MISSILE_BLAST_RADIUS,
    MISSILE_SPEED,
    ROCKET_ARRIVAL_EPS,
    SCORE_PER_ROCKET,
    SHIELD_BLAST_RADIUS,
    SHIELD_CHARGE_SECONDS,
    SMOKE_BURST_COUNT,
    TRACKING_BONUS_KILLS,
    WIN_SCORE,
)


class Difficulty(str, Enum):
    EASY = "EASY"
    NORMAL = "NORMAL"
    HARD = "HARD"
    EXTREME = "EXTREME"
    MYTHIC = "MYTHIC"

    @classmethod
    def parse(cls, value: str | Difficulty) -> Difficulty:
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            names = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {value!r} (expected one of: {names})") from None


@dataclass(frozen=True)
class DifficultyConfig:
    name: str
    rocket_speed_min: float
    rocket_speed_max: float
    spawn_interval: float  # seconds between rockets

    def __post_init__(self) -> None:
        if self.rocket_speed_min <= 0.0 or self.rocket_speed_max < self.rocket_speed_min:
            raise ValueError(
                f"{self.name}: invalid rocket speed range [{self.rocket_speed_min}, {self.rocket_speed_max}]"
            )
        if self.spawn_interval <= 0.0:
            raise ValueError(f"{self.name}: spawn_interval must be positive, got {self.spawn_interval}")


# Easiest to hardest: interval shrinks, speeds grow.
DIFFICULTY_PRESETS: dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig("EASY", rocket_speed_min=20.0, rocket_speed_max=50.0, spawn_interval=2.5),
    Difficulty.NORMAL: DifficultyConfig("NORMAL", rocket_speed_min=30.0, rocket_speed_max=70.0, spawn_interval=1.8),
    Difficulty.HARD: DifficultyConfig("HARD", rocket_speed_min=50.0, rocket_speed_max=100.0, spawn_interval=1.2),
    Difficulty.EXTREME: DifficultyConfig(
        "EXTREME", rocket_speed_min=80.0, rocket_speed_max=150.0, spawn_interval=0.8
    ),
    Difficulty.MYTHIC: DifficultyConfig("MYTHIC", rocket_speed_min=120.0, rocket_speed_max=250.0, spawn_interval=0.5),
}


def difficulty_config(difficulty: str | Difficulty) -> DifficultyConfig:
    return DIFFICULTY_PRESETS[Difficulty.parse(difficulty)]


@dataclass(frozen=True)
class FieldConfig:
    width: float = FIELD_WIDTH
    height: float = FIELD_HEIGHT

    def __post_init__(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ValueError(f"Field size must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class BatterySpec:
    battery_id: str
    x: float
    max_ammo: int


@dataclass(frozen=True)
class LayoutConfig:
    city_xs: tuple[float, ...] = (150.0, 220.0, 290.0, 440.0, 510.0, 580.0)
    batteries: tuple[BatterySpec, ...] = (
        BatterySpec("left", 50.0, 50),
        BatterySpec("center", 400.0, 80),
        BatterySpec("right", 750.0, 50),
    )
    city_ground_offset: float = CITY_GROUND_OFFSET
    battery_ground_offset: float = BATTERY_GROUND_OFFSET
    city_hit_radius: float = CITY_HIT_RADIUS
    battery_hit_radius: float = BATTERY_HIT_RADIUS

    def __post_init__(self) -> None:
        if not self.batteries:
            raise ValueError("Layout needs at least one battery")
        ids = [b.battery_id for b in self.batteries]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate battery ids in layout: {ids}")


@dataclass(frozen=True)
class RulesConfig:
    score_per_rocket: int = SCORE_PER_ROCKET
    win_score: int = WIN_SCORE
    tracking_bonus_kills: int = TRACKING_BONUS_KILLS

    missile_speed: float = MISSILE_SPEED
    rocket_arrival_eps: float = ROCKET_ARRIVAL_EPS
    missile_arrival_eps: float = MISSILE_ARRIVAL_EPS

    explosion_growth_rate: float = EXPLOSION_GROWTH_RATE
    missile_blast_radius: float = MISSILE_BLAST_RADIUS
    impact_blast_radius: float = IMPACT_BLAST_RADIUS
    impact_destroy_blast_radius: float = IMPACT_DESTROY_BLAST_RADIUS
    shield_blast_radius: float = SHIELD_BLAST_RADIUS

    city_repair_seconds: float = CITY_REPAIR_SECONDS
    battery_repair_seconds: float = BATTERY_REPAIR_SECONDS
    shield_charge_seconds: float = SHIELD_CHARGE_SECONDS

    smoke_burst_count: int = SMOKE_BURST_COUNT

    def __post_init__(self) -> None:
        positive = (
            "score_per_rocket",
            "win_score",
            "tracking_bonus_kills",
            "missile_speed",
            "rocket_arrival_eps",
            "missile_arrival_eps",
            "explosion_growth_rate",
            "missile_blast_radius",
            "impact_blast_radius",
            "impact_destroy_blast_radius",
            "shield_blast_radius",
            "city_repair_seconds",
            "battery_repair_seconds",
            "shield_charge_seconds",
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.smoke_burst_count < 0:
            raise ValueError(f"smoke_burst_count must be non-negative, got {self.smoke_burst_count}")


@dataclass(frozen=True)
class GameConfig:
    playfield: FieldConfig = field(default_factory=FieldConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    seed: int | None = None
