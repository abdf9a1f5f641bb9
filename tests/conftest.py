import numpy as np
import pytest

from novadefense.config import DifficultyConfig, GameConfig
from novadefense.sim.collision import spawn_explosion
from novadefense.sim.entities import BlastSource, Rocket
from novadefense.sim.sim import Sim

# Rockets never spawn on their own; scenario tests place them by hand.
QUIET = DifficultyConfig("QUIET", rocket_speed_min=40.0, rocket_speed_max=40.0, spawn_interval=1e9)


@pytest.fixture
def quiet_difficulty() -> DifficultyConfig:
    return QUIET


@pytest.fixture
def quiet_sim():
    sim = Sim(GameConfig(seed=0), rng=np.random.default_rng(0))
    sim.reset(QUIET)
    return sim


@pytest.fixture
def normal_sim():
    sim = Sim(GameConfig(seed=7), rng=np.random.default_rng(7))
    sim.reset("NORMAL")
    return sim


@pytest.fixture
def place_rocket():
    def _place(sim: Sim, pos, target=None, speed: float = 40.0) -> Rocket:
        state = sim.state
        assert state is not None
        target = [float(pos[0]), 540.0] if target is None else target
        rocket = Rocket(
            entity_id=state.new_id("rocket"),
            pos=np.array(pos, dtype=np.float64),
            target=np.array(target, dtype=np.float64),
            speed=speed,
            start_x=float(pos[0]),
        )
        state.add_rocket(rocket)
        return rocket

    return _place


@pytest.fixture
def place_blast():
    def _place(sim: Sim, center, radius: float, source: BlastSource = BlastSource.MISSILE, max_radius: float = 55.0):
        state = sim.state
        assert state is not None
        blast = spawn_explosion(state, np.array(center, dtype=np.float64), max_radius, sim.rules, source)
        blast.radius = float(radius)
        return blast

    return _place
