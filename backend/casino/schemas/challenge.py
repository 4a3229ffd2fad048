"""Challenge and play Pydantic schemas."""

from pydantic import BaseModel, Field

from casino.core.challenge import Challenge, ChallengeContent, Difficulty


class ChallengeData(BaseModel):
    """Full challenge content, re-submitted by the client for AI/document challenges."""
    title: str
    description: str = ""
    snippet1: str
    snippet2: str
    correct_answer: int = Field(ge=1, le=2)
    explanation: str = ""
    tech_stack: str
    difficulty: Difficulty

    def to_content(self) -> ChallengeContent:
        return ChallengeContent(**self.model_dump())


class ChallengeView(BaseModel):
    id: int  # 0 = AI, -1 = document catalog, >0 = catalog row
    title: str
    description: str
    snippet1: str
    snippet2: str
    tech_stack: str
    difficulty: Difficulty
    source_tag: str
    is_daily: bool = False
    # Only present for stateless challenges; send it back with the play
    challenge_data: ChallengeData | None = None

    @classmethod
    def from_challenge(cls, challenge: Challenge, is_daily: bool = False) -> "ChallengeView":
        content = challenge.content
        return cls(
            id=challenge.id,
            title=content.title,
            description=content.description,
            snippet1=content.snippet1,
            snippet2=content.snippet2,
            tech_stack=content.tech_stack,
            difficulty=content.difficulty,
            source_tag=challenge.kind.value,
            is_daily=is_daily,
            challenge_data=ChallengeData(**challenge.payload()) if challenge.is_stateless else None,
        )


class ChallengeResponse(BaseModel):
    challenge: ChallengeView
    user_points: int


class PlayRequest(BaseModel):
    challenge_id: int
    user_answer: int = Field(ge=1, le=2)
    bet_points: int = Field(gt=0)
    challenge_data: ChallengeData | None = None


class PlayOutcome(BaseModel):
    is_correct: bool
    points_won: int
    new_balance: int
    explanation: str
    message: str
