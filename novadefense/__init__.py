from .config import Difficulty, DifficultyConfig, GameConfig
from .game import GameLoop
from .sim.sim import Sim

__all__ = ["Difficulty", "DifficultyConfig", "GameConfig", "GameLoop", "Sim"]
