"""Async SQLAlchemy engine, declarative base and session dependency."""

from collections.abc import AsyncGenerator

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from casino.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def insert_ignoring_conflicts(db: AsyncSession, model, index_elements: list[str], **values):
    """Build an INSERT that silently skips rows violating a unique index.

    Used where two requests may race to create the same row; the caller
    re-reads the row afterwards instead of handling IntegrityError.
    """
    dialect = db.bind.dialect.name
    if dialect == "sqlite":
        stmt = sqlite.insert(model)
    elif dialect == "postgresql":
        stmt = postgresql.insert(model)
    else:
        raise NotImplementedError(f"Unsupported dialect for conflict-free insert: {dialect}")
    return stmt.values(**values).on_conflict_do_nothing(index_elements=index_elements)
