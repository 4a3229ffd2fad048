"""User and stats Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from casino.core.challenge import Difficulty
from casino.core.zodiac import ZodiacSign


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(default="", max_length=100)
    tech_stack: str = Field(min_length=1, max_length=50)
    experience_level: Difficulty
    zodiac_sign: ZodiacSign


class UserStatsView(BaseModel):
    total_games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    best_streak: int = 0
    total_points_earned: int = 0
    total_points_lost: int = 0
    last_played_at: datetime | None = None
    played_today: bool = False
    win_rate: float = 0

    model_config = {"from_attributes": True}


class UserState(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str
    tech_stack: str
    experience_level: Difficulty
    zodiac_sign: ZodiacSign
    points: int
    created_at: datetime | None = None
    # Absent until the first play or stats read
    stats: UserStatsView | None = None

    model_config = {"from_attributes": True}


class UserCreated(BaseModel):
    user: UserState
    session_token: str
