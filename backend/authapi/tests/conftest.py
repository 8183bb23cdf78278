import os
import tempfile

# point the app at a throwaway database before any authapi module reads settings
TEST_DB_PATH = None
os.environ.setdefault("APP_ENV", "test")
if "DATABASE_URL" not in os.environ:
    TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"authapi_test_{os.getpid()}.db")
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + TEST_DB_PATH

import pytest
import pytest_asyncio
from httpx import ASGITransport
from authapi.main import app
from authapi.testing.client import ApiClient
from authapi.testing.db import reset_db

@pytest.fixture(scope="session", autouse=True)
def remove_test_db():
    yield
    if TEST_DB_PATH and os.path.exists(TEST_DB_PATH):
        os.remove(TEST_DB_PATH)

@pytest_asyncio.fixture
async def client():
    await reset_db()
    async with ApiClient("http://test/api", transport=ASGITransport(app=app)) as api:
        yield api
