"""Challenge catalog and daily challenge pointer models."""

import datetime as dt

from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from casino.core.challenge import Challenge, ChallengeContent, Difficulty
from casino.db.database import Base


class CasinoChallenge(Base):
    """A stored challenge in the relational catalog."""
    __tablename__ = "casino_challenges"

    id: Mapped[int] = mapped_column(primary_key=True)
    tech_stack: Mapped[str] = mapped_column(String(50), index=True)
    difficulty: Mapped[str] = mapped_column(String(20))  # Difficulty value
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    code_snippet1: Mapped[str] = mapped_column(Text)
    code_snippet2: Mapped[str] = mapped_column(Text)
    correct_answer: Mapped[int] = mapped_column(Integer)  # 1 or 2
    explanation: Mapped[str] = mapped_column(Text, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now())

    def to_challenge(self) -> Challenge:
        return Challenge.stored(
            self.id,
            ChallengeContent(
                title=self.title,
                description=self.description or "",
                snippet1=self.code_snippet1,
                snippet2=self.code_snippet2,
                correct_answer=self.correct_answer,
                explanation=self.explanation or "",
                tech_stack=self.tech_stack,
                difficulty=Difficulty(self.difficulty),
            ),
        )


class DailyChallenge(Base):
    """Points at the challenge of the day. At most one row per UTC date."""
    __tablename__ = "daily_challenges"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, unique=True)
    challenge_id: Mapped[int] = mapped_column(Integer)  # 0 / -1 / catalog row id
    source_kind: Mapped[str] = mapped_column(String(20))  # SourceKind value

    # Stateless (AI / document) challenges cannot be looked up by id
    payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    fingerprint: Mapped[str | None] = mapped_column(String(64), nullable=True)

    bonus_multiplier: Mapped[int] = mapped_column(Integer, default=3)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now())
