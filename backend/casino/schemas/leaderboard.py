"""Leaderboard Pydantic schemas."""

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    username: str
    first_name: str
    zodiac_sign: str
    total_points: int
    games_played: int
    # Plays per challenge source
    ai_games: int = 0
    document_games: int = 0
    catalog_games: int = 0
    current_streak: int = 0
    best_streak: int = 0
    win_rate: float = 0


class LeaderboardResponse(BaseModel):
    leaderboard: list[LeaderboardEntry]
