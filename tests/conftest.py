"""
Pytest fixtures for StackIt tests.
"""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stackit.config import Settings
from stackit.database import close_db, create_engine, create_session_maker, init_db
from stackit.engines.voting import VoteAcceptFacade
from stackit.kernel.identity.jwt import JWTManager
from stackit.kernel.identity.password import PasswordHasher, hash_password
from stackit.kernel.models.user import User
from stackit.kernel.store import (
    AnswerRecord,
    InMemoryEntityStore,
    QuestionRecord,
    SqlEntityStore,
)


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Cheap bcrypt cost factor; hashes stay verifiable."""
    monkeypatch.setattr(PasswordHasher, "rounds", 4)


@pytest.fixture
def author_id() -> uuid.UUID:
    """The question author."""
    return uuid.uuid4()


@pytest.fixture
def alice_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def bob_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def facade(store: InMemoryEntityStore) -> VoteAcceptFacade:
    return VoteAcceptFacade(store, retry_backoff_ms=0)


@pytest_asyncio.fixture
async def question(store, author_id) -> QuestionRecord:
    """A question with no answers yet."""
    return await store.create(
        QuestionRecord(id=uuid.uuid4(), author_id=author_id, title="How do I merge two dicts?")
    )


@pytest_asyncio.fixture
async def answer_a(store, question, alice_id) -> AnswerRecord:
    return await store.create(
        AnswerRecord(
            id=uuid.uuid4(),
            question_id=question.id,
            author_id=alice_id,
            content="Use the | operator.",
        )
    )


@pytest_asyncio.fixture
async def answer_b(store, question, bob_id) -> AnswerRecord:
    return await store.create(
        AnswerRecord(
            id=uuid.uuid4(),
            question_id=question.id,
            author_id=bob_id,
            content="Use dict.update().",
        )
    )


# Database fixtures (SQLite file per test)

@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'stackit_test.db'}"


@pytest_asyncio.fixture
async def db_engine(database_url):
    """Create a test database engine with all tables."""
    engine = create_engine(database_url)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(db_engine)


@pytest.fixture
def sql_store(session_maker) -> SqlEntityStore:
    return SqlEntityStore(session_maker)


@pytest_asyncio.fixture
async def db_users(session_maker, author_id, alice_id, bob_id) -> dict:
    """Persist the author, alice and bob so foreign keys resolve."""
    users = {
        "author": User(id=author_id, email="author@example.com", username="author",
                       password_hash=hash_password("AuthorPass123")),
        "alice": User(id=alice_id, email="alice@example.com", username="alice",
                      password_hash=hash_password("AlicePass123")),
        "bob": User(id=bob_id, email="bob@example.com", username="bob",
                    password_hash=hash_password("BobPass123")),
    }
    async with session_maker() as session:
        session.add_all(users.values())
        await session.commit()
    return users


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


# Application fixtures

@pytest.fixture
def test_settings(database_url) -> Settings:
    return Settings(
        database_url=database_url,
        secret_key="test-secret-key-for-testing-only",
        environment="test",
        log_level="WARNING",
        retry_backoff_ms=0,
    )


@pytest_asyncio.fixture
async def client(test_settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to a fresh application and database."""
    from stackit.main import create_app

    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
