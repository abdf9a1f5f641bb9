from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

import numpy as np

from .entities import Rocket

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config import DifficultyConfig
    from .assets import GroundAsset


class Spawner:
    """Drops rockets from the top edge toward a random live ground asset.

    The caller owns the elapsed-time accumulator and resets it to zero whenever
    the interval is crossed, so a long stall yields a single rocket, not a burst.
    """

    def __init__(self, field_width: float, rng: np.random.Generator):
        self.field_width = float(field_width)
        self.rng = rng
        self._ids = itertools.count()

    def due(self, elapsed: float, difficulty: DifficultyConfig) -> bool:
        return elapsed > difficulty.spawn_interval

    def try_spawn(
        self,
        elapsed: float,
        difficulty: DifficultyConfig,
        live_assets: Sequence[GroundAsset],
    ) -> Rocket | None:
        if not self.due(elapsed, difficulty) or not live_assets:
            return None

        start_x = float(self.rng.uniform(0.0, self.field_width))
        target = live_assets[int(self.rng.integers(len(live_assets)))]
        speed = float(self.rng.uniform(difficulty.rocket_speed_min, difficulty.rocket_speed_max))
        return Rocket(
            entity_id=f"rocket_{next(self._ids)}",
            pos=np.array([start_x, 0.0], dtype=np.float64),
            target=target.pos.copy(),
            speed=speed,
            start_x=start_x,
        )
