"""
pytest configuration and fixtures for the people API test suite
The application is driven in-process over ASGI with a fake database pool.
"""

import os

# Configuration is validated at import time, so it must exist before the app loads
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_PORT", "5432")
os.environ.setdefault("DB_USERNAME", "people")
os.environ.setdefault("DB_PASSWORD", "people-secret")
os.environ.setdefault("DB_NAME", "people_test")

import httpx
import pytest
import pytest_asyncio

from app import app
from database import connection
from .infrastructure import FakePool

SEED_PEOPLE = [
    {"name": "Budi", "nickname": "Bud", "uuid": "5b4c6f4e-1f0a-4c44-9a55-0b7f1d6c9a01"},
    {"name": "Sari", "nickname": "Sar", "uuid": "a3d2e1f0-7c6b-4a59-8e48-3d2c1b0a9f02"},
]


@pytest.fixture
def fake_pool(monkeypatch):
    """Fake pool pre-loaded with two people"""
    pool = FakePool(SEED_PEOPLE)
    monkeypatch.setattr(connection, "db_pool", pool)
    return pool


@pytest.fixture
def empty_pool(monkeypatch):
    """Fake pool with an empty Person table"""
    pool = FakePool()
    monkeypatch.setattr(connection, "db_pool", pool)
    return pool


@pytest_asyncio.fixture
async def client():
    """HTTP client bound to the ASGI app (lifespan not run)"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
