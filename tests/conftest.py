"""Pytest configuration and shared fixtures."""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker

from bailout.db.session import make_engine, init_db


@pytest_asyncio.fixture
async def sessions(tmp_path):
    """Session factory bound to a fresh file-backed SQLite database."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'bailout.db'}", echo=False)
    await init_db(engine)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(sessions, monkeypatch):
    """HTTP client against the app, routed to the test database."""
    from bailout.api import routes
    from bailout.main import app

    monkeypatch.setattr(routes, "SessionLocal", sessions)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
