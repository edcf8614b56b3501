"""
Общие фикстуры: приложение в процессе + MongoDB в памяти
"""
import os
import pytest
import httpx
from datetime import datetime
from mongomock_motor import AsyncMongoMockClient

from syncpad.main import app
from syncpad.database import database
from syncpad.services.auth import pwd_context
from syncpad.services.encryption import init_encryption

API_URL = "/api"

init_encryption("test-encryption-key")
# Быстрый bcrypt для тестов
pwd_context.update(bcrypt__rounds=4)


@pytest.fixture(autouse=True)
def mock_db(monkeypatch):
    """Подменяет подключение к MongoDB на mongomock"""
    client = AsyncMongoMockClient()

    async def always_connected():
        return True

    monkeypatch.setattr(database, "client", client)
    monkeypatch.setattr(database, "db", client["syncpad_test"])
    monkeypatch.setattr(database, "_connected", True)
    monkeypatch.setattr(database, "check_connection", always_connected)
    return database.db


@pytest.fixture
async def client():
    """Асинхронный HTTP клиент для тестов"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test", timeout=30.0) as client:
        yield client


@pytest.fixture
def register_user(client):
    """Фабрика пользователей: регистрирует и возвращает токен, профиль и заголовки"""
    async def _register(name: str = "Test User", password: str = "TestPassword123!"):
        email = f"test_{datetime.now().timestamp()}_{os.urandom(4).hex()}@example.com"
        credentials = {"email": email, "password": password, "name": name}

        response = await client.post(f"{API_URL}/auth/register", json=credentials)
        assert response.status_code == 200, f"Registration failed: {response.text}"
        data = response.json()
        return {
            "token": data["access_token"],
            "user": data["user"],
            "credentials": credentials,
            "headers": {"Authorization": f"Bearer {data['access_token']}"},
        }

    return _register


@pytest.fixture
async def registered_user(register_user):
    return await register_user()


@pytest.fixture
async def other_user(register_user):
    return await register_user(name="Other User")


@pytest.fixture
def create_note(client):
    """Создаёт заметку от имени пользователя и возвращает её id"""
    async def _create(owner: dict, **fields):
        payload = {"title": "Test Note", "content": "Secret content"}
        payload.update(fields)
        response = await client.post(f"{API_URL}/notes", json=payload, headers=owner["headers"])
        assert response.status_code == 200, f"Note creation failed: {response.text}"
        return response.json()["note"]

    return _create
