"""Challenge value object and its source-tagged identity.

A challenge comes from one of three sources. Catalog rows are stored and
addressed by their primary key; AI and document challenges are stateless and
must be re-submitted in full by the client when played. On the wire the three
cases share one integer id:

    0   -> AI generated
    -1  -> document catalog
    >0  -> relational catalog row id
"""

import hashlib
import json
from dataclasses import asdict, dataclass
from enum import Enum

AI_CHALLENGE_ID = 0
DOCUMENT_CHALLENGE_ID = -1


class Difficulty(str, Enum):
    JUNIOR = "Junior"
    MIDDLE = "Middle"
    SENIOR = "Senior"


class SourceKind(str, Enum):
    AI_GENERATED = "ai"
    DOCUMENT_CATALOG = "document"
    RELATIONAL_CATALOG = "catalog"


class GameType(str, Enum):
    """Ledger tag for a Score row."""
    AI_CHALLENGE = "ai_challenge"
    DOCUMENT_CHALLENGE = "document_challenge"
    CASINO = "casino"
    INITIAL = "initial"


GAME_TYPE_BY_SOURCE = {
    SourceKind.AI_GENERATED: GameType.AI_CHALLENGE,
    SourceKind.DOCUMENT_CATALOG: GameType.DOCUMENT_CHALLENGE,
    SourceKind.RELATIONAL_CATALOG: GameType.CASINO,
}

STATELESS_SOURCE_BY_ID = {
    AI_CHALLENGE_ID: SourceKind.AI_GENERATED,
    DOCUMENT_CHALLENGE_ID: SourceKind.DOCUMENT_CATALOG,
}


@dataclass(frozen=True)
class ChallengeContent:
    """The playable part of a challenge, as re-submitted by clients."""
    title: str
    description: str
    snippet1: str
    snippet2: str
    correct_answer: int
    explanation: str
    tech_stack: str
    difficulty: Difficulty


@dataclass(frozen=True)
class Challenge:
    kind: SourceKind
    content: ChallengeContent
    row_id: int | None = None

    def __post_init__(self):
        if (self.kind is SourceKind.RELATIONAL_CATALOG) != (self.row_id is not None):
            raise ValueError("row_id is required for catalog challenges and forbidden otherwise")
        if self.row_id is not None and self.row_id <= 0:
            raise ValueError(f"Catalog row id must be positive, got {self.row_id}")

    @classmethod
    def ai(cls, content: ChallengeContent) -> "Challenge":
        return cls(SourceKind.AI_GENERATED, content)

    @classmethod
    def document(cls, content: ChallengeContent) -> "Challenge":
        return cls(SourceKind.DOCUMENT_CATALOG, content)

    @classmethod
    def stored(cls, row_id: int, content: ChallengeContent) -> "Challenge":
        return cls(SourceKind.RELATIONAL_CATALOG, content, row_id)

    @property
    def id(self) -> int:
        """Wire id following the 0 / -1 / row-id scheme."""
        if self.kind is SourceKind.AI_GENERATED:
            return AI_CHALLENGE_ID
        if self.kind is SourceKind.DOCUMENT_CATALOG:
            return DOCUMENT_CHALLENGE_ID
        return self.row_id

    @property
    def is_stateless(self) -> bool:
        return self.kind is not SourceKind.RELATIONAL_CATALOG

    @property
    def game_type(self) -> GameType:
        return GAME_TYPE_BY_SOURCE[self.kind]

    def payload(self) -> dict:
        """JSON-safe content, used to persist or echo stateless challenges."""
        data = asdict(self.content)
        data["difficulty"] = self.content.difficulty.value
        return data

    def fingerprint(self) -> str:
        """Stable hash of the content; distinguishes stateless challenges sharing a wire id."""
        raw = json.dumps(self.payload(), sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    @classmethod
    def from_payload(cls, kind: SourceKind, payload: dict, row_id: int | None = None) -> "Challenge":
        content = ChallengeContent(
            title=payload["title"],
            description=payload.get("description", ""),
            snippet1=payload["snippet1"],
            snippet2=payload["snippet2"],
            correct_answer=int(payload["correct_answer"]),
            explanation=payload.get("explanation", ""),
            tech_stack=payload["tech_stack"],
            difficulty=Difficulty(payload["difficulty"]),
        )
        return cls(kind, content, row_id)
