"""Global pytest fixtures for testing."""

import contextlib
import os
from collections.abc import AsyncGenerator

import dotenv
import pytest
import pytest_asyncio
from pydantic import BaseModel, Field
from sqlalchemy import String, Text, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from glossa_core.multilingual import Multilingual, TranslatableMixin
from glossa_core.schemas import LanguageContext, MultilingualConfig
from glossa_database import Base, generate_uuid

with contextlib.suppress(OSError):
    dotenv.load_dotenv()

# Test database URL - in-memory SQLite unless TEST_DATABASE_URL is set
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Safety check: ensure tests only run on a test database
if not TEST_DATABASE_URL.startswith("sqlite") and "test" not in TEST_DATABASE_URL:
    raise RuntimeError(
        f"Safety check failed: TEST_DATABASE_URL must point to a test database "
        f"(name should contain 'test'). Current: {TEST_DATABASE_URL}"
    )


class Post(TranslatableMixin, Base):
    """Blog post with translatable title and content."""

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str | None] = mapped_column(String(255))
    content: Mapped[str | None] = mapped_column(Text)
    author: Mapped[str | None] = mapped_column(String(100))


class PostRules(BaseModel):
    """Field rules of a post."""

    title: str = Field(max_length=255)
    content: str | None = None
    author: str | None = Field(default=None, max_length=100)


POST_CONFIG = MultilingualConfig(
    localized_attributes=["title", "content"],
    languages={"en": "English", "fr": "Français"},
    default_language="en",
    localized_foreign_key="post_id",
    force_overwrite=False,
    force_delete=True,
    rules_schema=PostRules,
)

post_multilingual = Multilingual.attach(Post, POST_CONFIG)


class Memo(TranslatableMixin, Base):
    """Internal note whose translations outlive it."""

    __tablename__ = "memos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    body: Mapped[str | None] = mapped_column(Text)


memo_multilingual = Multilingual.attach(
    Memo,
    MultilingualConfig(
        localized_attributes=["body"],
        languages=["en", "fr"],
        default_language="en",
        force_delete=False,
    ),
)


@pytest.fixture
def post_model() -> type[Post]:
    """The multilingual Post model."""
    return Post


@pytest.fixture
def post_behavior() -> Multilingual:
    """Behavior attached to Post with the default test configuration."""
    return post_multilingual


@pytest.fixture
def memo_behavior() -> Multilingual:
    """Behavior attached to Memo, which keeps shadow rows on delete."""
    return memo_multilingual


@pytest.fixture
def make_behavior():
    """Build another Post behavior with overridden options."""

    def _make(**overrides) -> Multilingual:
        return Multilingual(Post, POST_CONFIG.model_copy(update=overrides))

    return _make


@pytest.fixture
def english() -> LanguageContext:
    return LanguageContext(language="en")


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,  # Share the single in-memory connection
    )

    if TEST_DATABASE_URL.startswith("sqlite"):

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()
