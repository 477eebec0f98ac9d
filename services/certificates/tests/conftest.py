from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.certificates.storage import InMemoryCertificateStore, SqlAlchemyCertificateStore
from app.config import Settings
from app.dependencies import get_certificate_store
from app.main import create_app
from app.models import Certificate  # noqa: F401 - register with Base
from shared.database.postgres import Base, get_async_engine, get_async_session_factory


def _sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def store() -> InMemoryCertificateStore:
    return InMemoryCertificateStore()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=_sqlite_url(tmp_path / "certificates.db"),
        seed_on_startup=False,
        create_tables_on_startup=True,
    )


@pytest.fixture
def client(settings: Settings, store: InMemoryCertificateStore) -> Generator[TestClient, None, None]:
    app = create_app(settings)
    app.dependency_overrides[get_certificate_store] = lambda: store
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sql_client(settings: Settings) -> Generator[TestClient, None, None]:
    """Full app against a real SQLite database, no store override."""
    with TestClient(create_app(settings)) as c:
        yield c


@pytest_asyncio.fixture
async def db_session(tmp_path: Path) -> AsyncGenerator[AsyncSession, None]:
    engine = get_async_engine(_sqlite_url(tmp_path / "store.db"))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = get_async_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def sql_store(db_session: AsyncSession) -> SqlAlchemyCertificateStore:
    return SqlAlchemyCertificateStore(db_session)


_DEFAULT_PAYLOAD = {
    "certificateNumber": "GZ2024100",
    "recipientName": "Ada Lovelace",
    "courseName": "Analytical Engines",
    "issueDate": "2024-04-02",
    "completionDate": "2024-03-30",
    "grade": "A",
    "instructorName": "Charles Babbage",
}


@pytest.fixture
def make_payload():
    """Camel-cased create body; keyword overrides replace or add fields."""

    def _make(**overrides) -> dict:
        return {**_DEFAULT_PAYLOAD, **overrides}

    return _make
