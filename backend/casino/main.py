"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from casino.config import settings
from casino.core.logging import setup_logging
from casino.db.database import Base, async_session, engine
from casino.db.mongo import close_mongo, get_snippet_collection
from casino.db.redis import close_redis, init_redis
from casino.services.challenge_store import ChallengeStore
from casino.services.document_store import DocumentChallengeStore

logger = structlog.get_logger()


async def seed_catalogs() -> None:
    async with async_session() as session:
        await ChallengeStore(session).seed()
        await session.commit()

    try:
        await DocumentChallengeStore(get_snippet_collection()).seed()
    except PyMongoError as exc:
        # Document challenges are optional; sourcing skips the stage when Mongo is down
        logger.warning("snippet_seeding_failed", error=str(exc))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    await init_redis()

    # Startup: create tables (dev only; use Alembic in production)
    import casino.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.SEED_ON_STARTUP:
        await seed_catalogs()
    logger.info("app_started", env=settings.APP_ENV)
    yield
    # Shutdown: close connections
    await engine.dispose()
    await close_redis()
    await close_mongo()


app = FastAPI(
    title="Code Casino API",
    description="Wager points on which of two code snippets is correct",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
from casino.api.errors import setup_error_handlers  # noqa: E402
from casino.api.routes import casino, system, users  # noqa: E402

setup_error_handlers(app)

app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(casino.router, prefix="/api/casino", tags=["casino"])
app.include_router(system.router, tags=["system"])
