import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import DATABASE_URL, DB_ECHO
from .errors import UpstreamError

logger = logging.getLogger(__name__)

# Create Async Engine
engine = create_async_engine(DATABASE_URL, echo=DB_ECHO, future=True)

# Create Async Session Factory
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()

# Dependency for Routes
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session

# Helper to create tables (Run this once on startup)
async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def atomic(db: AsyncSession, action: str):
    """Run a block of writes as one transaction.

    Commits when the block exits cleanly. Database failures roll back and are
    re-raised as ``UpstreamError``; any other exception rolls back and
    propagates unchanged.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Database failure while trying to {action}")
        raise UpstreamError(f"Failed to {action}") from e
    except Exception:
        await db.rollback()
        raise
