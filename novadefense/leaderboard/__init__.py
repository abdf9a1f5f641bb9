from .history import Leaderboard
from .records import LeaderboardEntry, rating_for

__all__ = ["Leaderboard", "LeaderboardEntry", "rating_for"]
