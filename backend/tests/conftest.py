from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app
from app.routers.ai import get_advisor_service
from app.services.advisor_service import AdvisorService


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def advisor():
    return AdvisorService(client=None)


@pytest_asyncio.fixture
async def client(session_factory, advisor):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_advisor_service] = lambda: advisor

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_record(client):
    async def _create(day: str, hours: float, note: Optional[str] = None) -> dict:
        payload = {"date": day, "hours": hours}
        if note is not None:
            payload["note"] = note
        response = await client.post("/api/sleep-records", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
