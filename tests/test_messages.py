"""
Тесты обмена мини-заметками
"""
import pytest

from conftest import API_URL


async def send(client, sender, receiver, content="Hi there", **fields):
    payload = {"receiver_id": receiver["user"]["id"], "content": content}
    payload.update(fields)
    response = await client.post(f"{API_URL}/messages/send", json=payload, headers=sender["headers"])
    assert response.status_code == 200, response.text
    return response.json()["message"]


class TestMessages:

    @pytest.mark.asyncio
    async def test_send_message(self, client, registered_user, other_user):
        message = await send(client, registered_user, other_user, title="Hello")

        assert message["title"] == "Hello"
        assert message["content"] == "Hi there"
        assert message["is_read"] is False
        assert message["sender"]["id"] == registered_user["user"]["id"]

    @pytest.mark.asyncio
    async def test_default_title(self, client, registered_user, other_user):
        message = await send(client, registered_user, other_user)

        assert message["title"] == "Quick Note"

    @pytest.mark.asyncio
    async def test_message_encrypted_at_rest(self, client, registered_user, other_user, mock_db):
        message = await send(client, registered_user, other_user, content="Private words")

        stored = await mock_db.messages.find_one({"id": message["id"]})
        assert stored["content"] != "Private words"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"content": ""},
        {"content": "x" * 1001},
        {"content": "ok", "title": "t" * 101},
    ])
    async def test_send_validation(self, client, registered_user, other_user, payload):
        payload["receiver_id"] = other_user["user"]["id"]

        response = await client.post(f"{API_URL}/messages/send", json=payload, headers=registered_user["headers"])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_receiver(self, client, registered_user):
        response = await client.post(
            f"{API_URL}/messages/send",
            json={"receiver_id": "nobody", "content": "Hello?"},
            headers=registered_user["headers"]
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unread_and_conversation(self, client, registered_user, other_user):
        await send(client, registered_user, other_user, content="First")
        await send(client, registered_user, other_user, content="Second")

        response = await client.get(f"{API_URL}/messages/unread-count", headers=other_user["headers"])
        assert response.json()["unread_count"] == 2

        response = await client.get(f"{API_URL}/messages/conversations", headers=other_user["headers"])
        conversations = response.json()["conversations"]
        assert len(conversations) == 1
        assert conversations[0]["other_user"]["id"] == registered_user["user"]["id"]
        assert conversations[0]["unread_count"] == 2

        response = await client.get(
            f"{API_URL}/messages/with/{registered_user['user']['id']}",
            headers=other_user["headers"]
        )
        contents = {message["content"] for message in response.json()["messages"]}
        assert contents == {"First", "Second"}

        response = await client.get(f"{API_URL}/messages/unread-count", headers=other_user["headers"])
        assert response.json()["unread_count"] == 0

    @pytest.mark.asyncio
    async def test_mark_as_read_only_by_receiver(self, client, registered_user, other_user):
        message = await send(client, registered_user, other_user)

        response = await client.put(f"{API_URL}/messages/{message['id']}/read", headers=registered_user["headers"])
        assert response.status_code == 404

        response = await client.put(f"{API_URL}/messages/{message['id']}/read", headers=other_user["headers"])
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_message(self, client, registered_user, other_user, register_user):
        message = await send(client, registered_user, other_user)
        outsider = await register_user(name="Outsider")

        response = await client.delete(f"{API_URL}/messages/{message['id']}", headers=outsider["headers"])
        assert response.status_code == 404

        response = await client.delete(f"{API_URL}/messages/{message['id']}", headers=other_user["headers"])
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_messaging_users_excludes_self(self, client, registered_user, other_user):
        response = await client.get(f"{API_URL}/messages/users", headers=registered_user["headers"])

        ids = [user["id"] for user in response.json()["users"]]
        assert other_user["user"]["id"] in ids
        assert registered_user["user"]["id"] not in ids
