import os

# Must be set before spendguard.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spendguard import models
from spendguard.database import Base, get_db
from spendguard.dependencies import get_llm


class FakeLLM:
    """Stands in for GeminiClient. ``reply`` may be a string or a callable of the prompt."""

    def __init__(self, reply="approved", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt, max_tokens=256):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(prompt)
        return self.reply

    def rate_limit_status(self):
        return {"daily_remaining": 1, "minute_remaining": 1}


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def llm():
    return FakeLLM()


@pytest_asyncio.fixture
async def client(session_factory, llm):
    from spendguard.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm] = lambda: llm
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def add_goal(db):
    """Insert a goal row directly, bypassing validation."""

    async def _add(user_id="user_1", name="Goal", type="savings", target_amount=100.0,
                   current_amount=0.0, period="one_time", is_default=False):
        goal = models.Goal(
            user_id=user_id,
            name=name,
            type=type,
            target_amount=target_amount,
            current_amount=current_amount,
            period=period,
            is_default=is_default,
        )
        db.add(goal)
        await db.commit()
        await db.refresh(goal)
        return goal

    return _add


@pytest.fixture
def add_purchase_row(db):
    async def _add(user_id="user_1", price=10.0, purchase_date=None, item_name="Thing", website="shop.com"):
        purchase = models.Purchase(
            user_id=user_id,
            item_name=item_name,
            price=price,
            website=website,
            category="other",
            **({"purchase_date": purchase_date} if purchase_date else {}),
        )
        db.add(purchase)
        await db.commit()
        return purchase

    return _add
