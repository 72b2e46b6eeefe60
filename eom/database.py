# eom/database.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from eom.config import settings
from eom.core.errors import StoreError

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.effective_database_url, echo=settings.SQL_ECHO)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def store_guard(db: AsyncSession, action: str):
    """Turn driver failures into StoreError, rolling the session back first."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Record store rejected %s: %s", action, exc)
        await db.rollback()
        raise StoreError(f"Record store rejected {action}") from exc


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise StoreError(f"Upsert is not supported on dialect {dialect!r}")


async def upsert(db: AsyncSession, model, values: dict, key: Iterable[str], preserve: Iterable[str] = ()):
    """Insert ``values`` or overwrite the row holding the same unique ``key``.

    Runs as a single INSERT ... ON CONFLICT DO UPDATE so two writers on one key
    can never produce a duplicate row. Columns in ``preserve`` are written on
    insert only. Returns the stored instance.
    """
    key = list(key)
    kept = set(key) | set(preserve)
    stmt = _insert_for(db)(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=key,
        set_={name: stmt.excluded[name] for name in values if name not in kept},
    )
    async with store_guard(db, f"upsert into {model.__tablename__}"):
        await db.execute(stmt)
        await db.commit()
        result = await db.execute(
            select(model)
            .where(*[getattr(model, name) == values[name] for name in key])
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
