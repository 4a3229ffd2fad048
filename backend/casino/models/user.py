"""User model - the minimal profile the casino needs from the account layer."""

from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from casino.db.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100), default="")

    # Drives challenge selection
    tech_stack: Mapped[str] = mapped_column(String(50))
    experience_level: Mapped[str] = mapped_column(String(20))  # Difficulty value

    # Drives the luck multiplier
    zodiac_sign: Mapped[str] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
