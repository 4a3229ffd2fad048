"""Database models package."""

from casino.models.user import User
from casino.models.challenge import CasinoChallenge, DailyChallenge
from casino.models.game import CasinoGame, Score
from casino.models.user_stats import UserStats

__all__ = ["User", "CasinoChallenge", "DailyChallenge", "CasinoGame", "Score", "UserStats"]
