"""Challenge sourcing - picks a challenge from AI, documents, then the catalog.

Sources are tried in a fixed priority order. Each stage returns a challenge
or None; a stage that raises is logged and treated as None, so callers only
ever see "a challenge" or "nothing available".
"""

import random
from collections.abc import Awaitable, Callable
from datetime import date, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casino.config import settings
from casino.core.challenge import Challenge, Difficulty, SourceKind
from casino.core.clock import utcnow
from casino.db.database import insert_ignoring_conflicts
from casino.models.challenge import DailyChallenge
from casino.services.ai_service import AIChallengeGenerator
from casino.services.cache_service import CacheService, ai_quota_key
from casino.services.challenge_store import ChallengeStore
from casino.services.document_store import DocumentChallengeStore

logger = structlog.get_logger()

AI_QUOTA_WINDOW_SECONDS = 3600

Stage = Callable[[str, Difficulty], Awaitable[Challenge | None]]


class ChallengeSourcingPipeline:
    def __init__(
        self,
        db: AsyncSession,
        cache: CacheService,
        documents: DocumentChallengeStore | None,
        ai: AIChallengeGenerator | None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utcnow,
        ai_hourly_limit: int | None = None,
    ):
        self.db = db
        self.cache = cache
        self.catalog = ChallengeStore(db)
        self.documents = documents
        self.ai = ai
        self.rng = rng or random.Random()
        self.clock = clock
        self.ai_hourly_limit = (
            ai_hourly_limit if ai_hourly_limit is not None else settings.AI_HOURLY_LIMIT
        )

    def _stages(self) -> list[tuple[SourceKind, Stage]]:
        return [
            (SourceKind.AI_GENERATED, self._from_ai),
            (SourceKind.DOCUMENT_CATALOG, self._from_documents),
            (SourceKind.RELATIONAL_CATALOG, self._from_catalog),
        ]

    async def get_challenge(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        """First challenge produced by the source chain, or None if all fail."""
        for source, stage in self._stages():
            try:
                challenge = await stage(tech_stack, difficulty)
            except Exception as exc:
                logger.warning(
                    "challenge_source_failed", source=source.value, error=str(exc), exc_info=True
                )
                continue
            if challenge is not None:
                logger.info(
                    "challenge_sourced",
                    source=source.value,
                    challenge_id=challenge.id,
                    tech_stack=tech_stack,
                    difficulty=difficulty.value,
                )
                return challenge
            logger.info("challenge_source_empty", source=source.value, tech_stack=tech_stack)

        logger.warning("no_challenge_available", tech_stack=tech_stack, difficulty=difficulty.value)
        return None

    # --- Stages ---

    async def _from_ai(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        if self.ai is None:
            return None

        quota_key = ai_quota_key(self.clock())
        used = await self.cache.get_int(quota_key) or 0
        if used >= self.ai_hourly_limit:
            logger.info("ai_quota_exhausted", used=used, limit=self.ai_hourly_limit)
            return None

        challenge = await self.ai.generate(tech_stack, difficulty)
        if challenge is None:
            return None

        await self.cache.increment(quota_key, expire_seconds=AI_QUOTA_WINDOW_SECONDS)
        return challenge

    async def _from_documents(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        if self.documents is None:
            return None
        return await self.documents.find_random(tech_stack, difficulty)

    async def _from_catalog(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        # Widen the search until something matches: exact, same stack, anything
        for criteria in ((tech_stack, difficulty), (tech_stack, None), (None, None)):
            rows = await self.catalog.list_active(*criteria)
            if rows:
                return self.rng.choice(rows).to_challenge()
        return None

    # --- Daily challenge ---

    async def _daily_pointer(self, day: date) -> DailyChallenge | None:
        result = await self.db.execute(select(DailyChallenge).where(DailyChallenge.date == day))
        return result.scalar_one_or_none()

    async def _resolve_pointer(self, pointer: DailyChallenge) -> Challenge | None:
        kind = SourceKind(pointer.source_kind)
        if kind is SourceKind.RELATIONAL_CATALOG:
            row = await self.catalog.get(pointer.challenge_id)
            return row.to_challenge() if row is not None else None
        if pointer.payload:
            return Challenge.from_payload(kind, pointer.payload)
        return None

    async def _save_pointer(
        self, day: date, challenge: Challenge, existing: DailyChallenge | None
    ) -> DailyChallenge:
        values = dict(
            challenge_id=challenge.id,
            source_kind=challenge.kind.value,
            payload=challenge.payload() if challenge.is_stateless else None,
            fingerprint=challenge.fingerprint() if challenge.is_stateless else None,
            bonus_multiplier=settings.DAILY_BONUS_MULTIPLIER,
            is_active=True,
        )
        if existing is not None:
            for field, value in values.items():
                setattr(existing, field, value)
            await self.db.flush()
            return existing

        # A concurrent request may have created today's row first; keep theirs
        await self.db.execute(
            insert_ignoring_conflicts(self.db, DailyChallenge, ["date"], date=day, **values)
        )
        pointer = await self._daily_pointer(day)
        if pointer.challenge_id != challenge.id or pointer.fingerprint != values["fingerprint"]:
            logger.info("daily_challenge_race_lost", date=day.isoformat())
        return pointer

    async def get_daily_challenge(self, today: date | None = None) -> Challenge | None:
        """Today's challenge, sourcing and pinning one on the first request of the day."""
        today = today or self.clock().date()

        pointer = await self._daily_pointer(today)
        if pointer is not None and pointer.is_active:
            challenge = await self._resolve_pointer(pointer)
            if challenge is not None:
                return challenge

        challenge = await self.get_challenge(
            settings.DAILY_TECH_STACK, Difficulty(settings.DAILY_DIFFICULTY)
        )
        if challenge is None:
            return None

        pointer = await self._save_pointer(today, challenge, existing=pointer)
        logger.info("daily_challenge_created", date=today.isoformat(), challenge_id=pointer.challenge_id)
        return await self._resolve_pointer(pointer) or challenge

    async def daily_pointer_for(
        self, challenge: Challenge, today: date | None = None
    ) -> DailyChallenge | None:
        """Today's active pointer if it refers to exactly this challenge."""
        today = today or self.clock().date()
        pointer = await self._daily_pointer(today)
        if pointer is None or not pointer.is_active or pointer.challenge_id != challenge.id:
            return None
        if challenge.is_stateless and pointer.fingerprint != challenge.fingerprint():
            return None
        return pointer
