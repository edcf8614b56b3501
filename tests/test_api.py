"""
API Integration Tests для SyncPad
Тестирование регистрации, логина и работы с заметками
"""
import pytest

from conftest import API_URL


class TestAuthentication:
    """Тесты авторизации"""

    @pytest.mark.asyncio
    async def test_register_new_user(self, client):
        """Тест регистрации нового пользователя"""
        user_data = {
            "email": "New.User@Example.com",
            "password": "TestPassword123!",
            "name": "New Test User"
        }

        response = await client.post(f"{API_URL}/auth/register", json=user_data)

        assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"
        data = response.json()

        assert "access_token" in data
        assert data["user"]["email"] == "new.user@example.com"
        assert data["user"]["name"] == user_data["name"]
        assert data["user"]["unique_id"].startswith("NewTestUser")
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    @pytest.mark.asyncio
    async def test_register_defaults_name_to_email_prefix(self, client):
        response = await client.post(
            f"{API_URL}/auth/register",
            json={"email": "alice@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "alice"

    @pytest.mark.asyncio
    async def test_register_creates_welcome_note(self, client, registered_user):
        response = await client.get(f"{API_URL}/notes", headers=registered_user["headers"])

        assert response.status_code == 200
        notes = response.json()
        assert len(notes) == 1
        assert notes[0]["title"] == "Welcome to SyncPad!"
        assert registered_user["user"]["name"] in notes[0]["content"]
        assert notes[0]["is_public"] is False

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client, registered_user):
        """Тест регистрации с существующим email"""
        response = await client.post(f"{API_URL}/auth/register", json=registered_user["credentials"])

        assert response.status_code == 400
        assert "already exists" in response.json()["detail"].lower()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"email": "not-an-email", "password": "secret123"},
        {"email": "short@example.com", "password": "123"},
        {"email": "name@example.com", "password": "secret123", "name": "A"},
    ])
    async def test_register_validation(self, client, payload):
        response = await client.post(f"{API_URL}/auth/register", json=payload)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_login_success(self, client, registered_user):
        """Тест успешного логина"""
        response = await client.post(
            f"{API_URL}/auth/login",
            json={
                "email": registered_user["credentials"]["email"],
                "password": registered_user["credentials"]["password"]
            }
        )

        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["user"]["email"] == registered_user["credentials"]["email"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, registered_user):
        """Тест логина с неверным паролем"""
        response = await client.post(
            f"{API_URL}/auth/login",
            json={
                "email": registered_user["credentials"]["email"],
                "password": "WrongPassword123!"
            }
        )

        assert response.status_code == 401
        assert "invalid" in response.json()["detail"].lower()

    @pytest.mark.asyncio
    async def test_login_nonexistent_user(self, client):
        """Тест логина несуществующего пользователя"""
        response = await client.post(
            f"{API_URL}/auth/login",
            json={"email": "nonexistent@example.com", "password": "SomePassword123!"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_get_current_user(self, client, registered_user):
        """Тест получения информации о текущем пользователе"""
        response = await client.get(f"{API_URL}/auth/me", headers=registered_user["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == registered_user["credentials"]["email"]
        assert "password_hash" not in data

    @pytest.mark.asyncio
    async def test_get_current_user_invalid_token(self, client):
        """Тест получения пользователя с невалидным токеном"""
        response = await client.get(
            f"{API_URL}/auth/me",
            headers={"Authorization": "Bearer invalid_token"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_marks_user_offline(self, client, registered_user, mock_db):
        response = await client.post(f"{API_URL}/auth/logout", headers=registered_user["headers"])

        assert response.status_code == 200
        stored = await mock_db.users.find_one({"id": registered_user["user"]["id"]})
        assert stored["is_online"] is False
        assert stored["last_seen"] is not None


class TestNotes:
    """Тесты работы с заметками"""

    @pytest.mark.asyncio
    async def test_create_note(self, client, registered_user):
        """Тест создания заметки"""
        note_data = {"title": "Test Note", "content": "This is a test note content"}

        response = await client.post(f"{API_URL}/notes", json=note_data, headers=registered_user["headers"])

        assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"
        data = response.json()
        assert data["is_owner"] is True
        assert data["can_edit"] is True
        note = data["note"]
        assert note["title"] == note_data["title"]
        assert note["content"] == note_data["content"]
        assert note["owner_id"] == registered_user["user"]["id"]
        assert note["original_title"] == note_data["title"]
        assert note["public_access_token"] == ""
        assert "passcode" not in note

    @pytest.mark.asyncio
    async def test_create_note_without_auth(self, client):
        """Тест создания заметки без авторизации"""
        response = await client.post(f"{API_URL}/notes", json={"title": "Test", "content": "c"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_empty_note_rejected(self, client, registered_user):
        response = await client.post(
            f"{API_URL}/notes",
            json={"title": "   ", "content": ""},
            headers=registered_user["headers"]
        )

        assert response.status_code == 400
        assert "empty" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_create_note_without_title_gets_default(self, client, registered_user):
        response = await client.post(
            f"{API_URL}/notes",
            json={"content": "Only content"},
            headers=registered_user["headers"]
        )

        assert response.status_code == 200
        assert response.json()["note"]["title"] == "Untitled Note"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"title": "x" * 101, "content": "c"},
        {"title": "t", "content": "x" * 10001},
        {"title": "t", "content": "c", "encrypted": True},
        {"title": "t", "content": "c", "encrypted": True, "passcode": "123"},
    ])
    async def test_create_note_validation(self, client, registered_user, payload):
        response = await client.post(f"{API_URL}/notes", json=payload, headers=registered_user["headers"])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_note_sanitizes_input(self, client, registered_user):
        response = await client.post(
            f"{API_URL}/notes",
            json={"title": "  <b>Hello</b>  ", "content": "<a onclick=alert(1)>javascript:go</a>"},
            headers=registered_user["headers"]
        )

        note = response.json()["note"]
        assert note["title"] == "bHello/b"
        assert note["content"] == "a alert(1)go/a"

    @pytest.mark.asyncio
    async def test_note_text_encrypted_at_rest(self, client, registered_user, create_note, mock_db):
        note = await create_note(registered_user, title="Plain title", content="Plain content")

        stored = await mock_db.notes.find_one({"id": note["id"]})
        assert stored["title"] != "Plain title"
        assert stored["content"] != "Plain content"

    @pytest.mark.asyncio
    async def test_get_notes(self, client, registered_user, create_note):
        """Тест получения списка заметок"""
        await create_note(registered_user, title="Test Note for List")

        response = await client.get(f"{API_URL}/notes", headers=registered_user["headers"])

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data, list)
        assert any(note["title"] == "Test Note for List" for note in data)

    @pytest.mark.asyncio
    async def test_get_note_by_id(self, client, registered_user, create_note):
        """Тест получения заметки по ID"""
        note = await create_note(registered_user, title="Test Note for Get")

        response = await client.get(f"{API_URL}/notes/{note['id']}", headers=registered_user["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["note"]["id"] == note["id"]
        assert data["note"]["title"] == "Test Note for Get"
        assert data["requires_passcode"] is False

    @pytest.mark.asyncio
    async def test_get_missing_note(self, client, registered_user):
        response = await client.get(f"{API_URL}/notes/does-not-exist", headers=registered_user["headers"])

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_note(self, client, registered_user, create_note):
        """Тест обновления заметки"""
        note = await create_note(registered_user, title="Original Title", content="Original content")

        response = await client.put(
            f"{API_URL}/notes/{note['id']}",
            json={"title": "Updated Title", "content": "Updated content"},
            headers=registered_user["headers"]
        )

        assert response.status_code == 200
        data = response.json()["note"]
        assert data["title"] == "Updated Title"
        assert data["content"] == "Updated content"
        assert data["renamed"] is True
        assert data["original_title"] == "Original Title"

    @pytest.mark.asyncio
    async def test_update_note_requires_title(self, client, registered_user, create_note):
        note = await create_note(registered_user)

        response = await client.put(
            f"{API_URL}/notes/{note['id']}",
            json={"title": "  "},
            headers=registered_user["headers"]
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_enable_encryption_requires_passcode(self, client, registered_user, create_note):
        note = await create_note(registered_user)

        response = await client.put(
            f"{API_URL}/notes/{note['id']}",
            json={"encrypted": True},
            headers=registered_user["headers"]
        )
        assert response.status_code == 400

        response = await client.put(
            f"{API_URL}/notes/{note['id']}",
            json={"encrypted": True, "passcode": "4321"},
            headers=registered_user["headers"]
        )
        assert response.status_code == 200
        assert response.json()["note"]["encrypted"] is True

    @pytest.mark.asyncio
    async def test_delete_note(self, client, registered_user, create_note):
        """Тест удаления заметки"""
        note = await create_note(registered_user, title="Note to Delete")

        response = await client.delete(f"{API_URL}/notes/{note['id']}", headers=registered_user["headers"])
        assert response.status_code == 200

        # Проверяем что заметка удалена
        get_response = await client.get(f"{API_URL}/notes/{note['id']}", headers=registered_user["headers"])
        assert get_response.status_code == 404


class TestNotesSecurity:
    """Тесты безопасности заметок"""

    @pytest.mark.asyncio
    async def test_cannot_access_other_user_note(self, client, registered_user, other_user, create_note):
        """Тест: пользователь не может получить доступ к чужой заметке"""
        note = await create_note(registered_user, title="Private Note", content="Private content")

        response = await client.get(f"{API_URL}/notes/{note['id']}", headers=other_user["headers"])

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_anonymous_cannot_access_private_note(self, client, registered_user, create_note):
        note = await create_note(registered_user)

        response = await client.get(f"{API_URL}/notes/{note['id']}")

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_other_user_cannot_update_or_delete(self, client, registered_user, other_user, create_note):
        note = await create_note(registered_user, is_public=True, edit_permissions=True)

        response = await client.put(
            f"{API_URL}/notes/{note['id']}",
            json={"title": "Hijacked"},
            headers=other_user["headers"]
        )
        assert response.status_code == 403

        response = await client.delete(f"{API_URL}/notes/{note['id']}", headers=other_user["headers"])
        assert response.status_code == 403

        response = await client.post(f"{API_URL}/notes/{note['id']}/sharing", headers=other_user["headers"])
        assert response.status_code == 403


class TestService:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
