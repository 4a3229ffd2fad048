"""Relational challenge catalog - typed access to stored challenges."""

from pathlib import Path

import structlog
import yaml
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from casino.core.challenge import Difficulty
from casino.models.challenge import CasinoChallenge

logger = structlog.get_logger()

CATALOG_PATH = Path(__file__).parent.parent / "data" / "challenges" / "catalog.yaml"


class ChallengeStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active(
        self, tech_stack: str | None = None, difficulty: Difficulty | None = None
    ) -> list[CasinoChallenge]:
        """Active catalog rows, optionally filtered by stack and difficulty."""
        stmt = select(CasinoChallenge).where(CasinoChallenge.is_active.is_(True))
        if tech_stack is not None:
            stmt = stmt.where(CasinoChallenge.tech_stack == tech_stack)
        if difficulty is not None:
            stmt = stmt.where(CasinoChallenge.difficulty == difficulty.value)
        result = await self.db.execute(stmt.order_by(CasinoChallenge.id))
        return list(result.scalars().all())

    async def get(self, row_id: int) -> CasinoChallenge | None:
        return await self.db.get(CasinoChallenge, row_id)

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(CasinoChallenge.id)))
        return result.scalar_one()

    async def seed(self, path: Path = CATALOG_PATH) -> int:
        """Load seed challenges from YAML if the catalog is empty. Returns rows added."""
        if await self.count() > 0:
            return 0

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        entries = raw.get("challenges", [])
        for entry in entries:
            self.db.add(CasinoChallenge(
                tech_stack=entry["tech_stack"],
                difficulty=Difficulty(entry["difficulty"]).value,
                title=entry["title"],
                description=entry.get("description", ""),
                code_snippet1=entry["snippet1"],
                code_snippet2=entry["snippet2"],
                correct_answer=entry["correct_answer"],
                explanation=entry.get("explanation", ""),
            ))
        await self.db.flush()
        logger.info("catalog_seeded", count=len(entries))
        return len(entries)
