import io
import os
import tempfile

# Окружение задаём до импорта приложения: config читается при импорте
_TMP_DIR = tempfile.mkdtemp(prefix="flashnews-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'import.db')}")
os.environ.setdefault("MEDIA_ROOT", os.path.join(_TMP_DIR, "uploads"))
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from PIL import Image
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from flashnews.api.dependencies import get_async_db
from flashnews.core import config
from flashnews.database import make_engine, create_tables
from flashnews.main import app


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database per test."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def media_root(tmp_path, monkeypatch):
    root = tmp_path / "uploads"
    monkeypatch.setattr(config, "MEDIA_ROOT", root)
    monkeypatch.setattr(config, "MEDIA_STORAGE", "local")
    return root


@pytest.fixture
async def client(session_maker, media_root):
    async def _get_test_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """
    Registers and logs in a user, returns (user dict, auth headers).
    """
    async def _register(username: str, password: str = "secret123", **extra):
        response = await client.post("/api/register", json={"username": username, "password": password, **extra})
        assert response.status_code == 201, response.text
        login = await client.post("/api/login", json={"username": username, "password": password})
        assert login.status_code == 200, login.text
        body = login.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def create_news(client):
    async def _create(headers, **fields):
        data = {
            "title": "Local elections announced",
            "category": "Politics",
            "fullContent": "The city council announced the date of the local elections.",
        }
        data.update(fields)
        response = await client.post("/api/news", data=data, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
