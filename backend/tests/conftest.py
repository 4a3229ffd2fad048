"""Shared test fixtures - async SQLite plus fakeredis for isolated testing."""

import fakeredis
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from casino.core.challenge import Challenge, ChallengeContent, Difficulty, GameType
from casino.db.database import Base, get_db
from casino.models.challenge import CasinoChallenge
from casino.models.user import User
from casino.services.cache_service import CacheService
from casino.services.points_service import PointsService

# In-memory SQLite for tests (no Docker needed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///file::memory:?cache=shared&uri=true"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


async def _override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ---------------------------------------------------------------------------
# Fakes for the external challenge sources
# ---------------------------------------------------------------------------


def make_content(
    title: str = "Spot the bug",
    tech_stack: str = "Python",
    difficulty: Difficulty = Difficulty.MIDDLE,
    correct_answer: int = 1,
) -> ChallengeContent:
    return ChallengeContent(
        title=title,
        description="Which snippet is correct?",
        snippet1="print('ok')",
        snippet2="print 'ok'",
        correct_answer=correct_answer,
        explanation="Python 3 needs parentheses.",
        tech_stack=tech_stack,
        difficulty=difficulty,
    )


class FakeAIGenerator:
    """Returns queued results in order, repeating the last; queued exceptions are raised."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def generate(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        self.calls += 1
        if not self.results:
            return None
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeDocumentStore:
    def __init__(self, *challenges: Challenge, error: Exception | None = None):
        self.challenges = list(challenges)
        self.error = error
        self.calls = 0

    async def find_random(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        for challenge in self.challenges:
            if challenge.content.tech_stack == tech_stack and challenge.content.difficulty == difficulty:
                return challenge
        return None

    async def ping(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


async def create_user(
    db: AsyncSession,
    cache: CacheService,
    username: str = "alice",
    zodiac_sign: str = "Virgo",
    tech_stack: str = "Python",
    experience_level: str = "Middle",
    points: int = 100,
) -> User:
    """Insert a user with an initial ledger grant."""
    user = User(
        username=username,
        first_name=username.title(),
        last_name="Tester",
        tech_stack=tech_stack,
        experience_level=experience_level,
        zodiac_sign=zodiac_sign,
    )
    db.add(user)
    await db.flush()
    PointsService(db, cache).add_entry(user.id, GameType.INITIAL, points)
    await db.flush()
    return user


async def add_catalog_challenge(
    db: AsyncSession,
    tech_stack: str = "Python",
    difficulty: Difficulty = Difficulty.MIDDLE,
    correct_answer: int = 1,
    title: str = "Catalog challenge",
    is_active: bool = True,
) -> CasinoChallenge:
    row = CasinoChallenge(
        tech_stack=tech_stack,
        difficulty=difficulty.value,
        title=title,
        description="Pick the right one",
        code_snippet1="a = 1",
        code_snippet2="a == 1",
        correct_answer=correct_answer,
        explanation="Assignment uses a single equals sign.",
        is_active=is_active,
    )
    db.add(row)
    await db.flush()
    return row


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    # Import all models so Base.metadata knows about them
    import casino.models  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db():
    """Direct async DB session for service-level tests."""
    async with test_session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
async def redis():
    """A fresh in-process Redis per test."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def cache(redis):
    return CacheService(redis)


@pytest.fixture
def ai():
    """AI generator that produces nothing unless a test queues results."""
    return FakeAIGenerator()


@pytest.fixture
def documents():
    return FakeDocumentStore()


@pytest.fixture
async def client(redis, ai, documents):
    """Async HTTP test client with test DB, fake Redis and fake sources."""
    from casino.api.deps import get_ai_generator, get_document_store
    from casino.db.redis import get_redis
    from casino.main import app

    async def _override_get_redis():
        return redis

    async def _override_get_ai():
        return ai

    async def _override_get_documents():
        return documents

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_redis] = _override_get_redis
    app.dependency_overrides[get_ai_generator] = _override_get_ai
    app.dependency_overrides[get_document_store] = _override_get_documents
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user over HTTP; returns (user json, auth headers)."""

    async def _register(
        username: str = "alice",
        zodiac_sign: str = "Virgo",
        tech_stack: str = "Python",
        experience_level: str = "Middle",
    ):
        resp = await client.post("/api/users/", json={
            "username": username,
            "first_name": username.title(),
            "tech_stack": tech_stack,
            "experience_level": experience_level,
            "zodiac_sign": zodiac_sign,
        })
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["user"], {"Authorization": f"Bearer {data['session_token']}"}

    return _register
