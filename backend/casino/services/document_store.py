"""Document challenge store - community snippets kept in MongoDB."""

import random
from pathlib import Path

import structlog
import yaml
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from casino.core.challenge import Challenge, ChallengeContent, Difficulty

logger = structlog.get_logger()

SNIPPETS_PATH = Path(__file__).parent.parent / "data" / "challenges" / "snippets.yaml"


def snippet_to_challenge(doc: dict) -> Challenge:
    """Wrap a snippet document as a stateless document-catalog challenge."""
    return Challenge.document(
        ChallengeContent(
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            snippet1=doc["code1"],
            snippet2=doc["code2"],
            correct_answer=int(doc["correctAnswer"]),
            explanation=doc.get("explanation", ""),
            tech_stack=doc["techStack"],
            difficulty=Difficulty(doc["difficulty"]),
        )
    )


class DocumentChallengeStore:
    def __init__(self, collection: AsyncCollection, rng: random.Random | None = None):
        self.collection = collection
        self.rng = rng or random.Random()

    @staticmethod
    def _filter(tech_stack: str, difficulty: Difficulty) -> dict:
        return {"isActive": True, "techStack": tech_stack, "difficulty": difficulty.value}

    async def find_random(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        """A random active snippet for the stack and difficulty, or None."""
        query = self._filter(tech_stack, difficulty)
        count = await self.collection.count_documents(query)
        if count == 0:
            return None

        skip = self.rng.randrange(count)
        docs = await self.collection.find(query).skip(skip).limit(1).to_list(length=1)
        if not docs:
            return None
        return snippet_to_challenge(docs[0])

    async def seed(self, path: Path = SNIPPETS_PATH) -> int:
        """Insert seed snippets if the collection is empty. Returns documents added."""
        if await self.collection.count_documents({}) > 0:
            return 0

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        snippets = raw.get("snippets", [])
        if snippets:
            await self.collection.insert_many(snippets)
        logger.info("snippets_seeded", count=len(snippets))
        return len(snippets)

    async def ping(self) -> bool:
        try:
            await self.collection.database.command("ping")
            return True
        except PyMongoError as exc:
            logger.warning("mongo_ping_failed", error=str(exc))
            return False
