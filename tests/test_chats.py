"""Tests for chat and message endpoints"""
from datetime import datetime

import pytest
from fastapi import HTTPException

from chatrelay.core.config import settings
from chatrelay.core.llm_client import LLMError
from chatrelay.services.chat_service import ChatService


@pytest.mark.asyncio
async def test_create_and_list_chats(client, make_user):
    alice = await make_user("alice@example.com")

    first = await client.post("/api/v1/chats", json={"title": "First"}, headers=alice["headers"])
    second = await client.post("/api/v1/chats", json={}, headers=alice["headers"])

    assert first.status_code == 201
    assert second.json()["title"] == settings.DEFAULT_CHAT_TITLE
    chats = (await client.get("/api/v1/chats", headers=alice["headers"])).json()
    # Newest first
    assert [chat["id"] for chat in chats] == [second.json()["id"], first.json()["id"]]


@pytest.mark.asyncio
async def test_chats_are_private(client, make_user):
    """Another user's chat behaves exactly like a missing one"""
    alice = await make_user("alice@example.com")
    bob = await make_user("bob@example.com")
    chat = (await client.post("/api/v1/chats", json={"title": "Secret"}, headers=alice["headers"])).json()

    assert (await client.get("/api/v1/chats", headers=bob["headers"])).json() == []
    assert (await client.get(f"/api/v1/chats/{chat['id']}", headers=bob["headers"])).status_code == 404
    assert (await client.get(f"/api/v1/chats/{chat['id']}/messages", headers=bob["headers"])).status_code == 404
    assert (await client.patch(f"/api/v1/chats/{chat['id']}", json={"title": "Mine"}, headers=bob["headers"])).status_code == 404
    assert (await client.delete(f"/api/v1/chats/{chat['id']}", headers=bob["headers"])).status_code == 404

    assert (await client.get(f"/api/v1/chats/{chat['id']}", headers=alice["headers"])).json()["title"] == "Secret"


@pytest.mark.asyncio
async def test_update_chat_title_and_system_prompt(client, make_user):
    alice = await make_user("alice@example.com")
    chat = (await client.post("/api/v1/chats", json={"title": "Old"}, headers=alice["headers"])).json()

    response = await client.patch(
        f"/api/v1/chats/{chat['id']}",
        json={"title": "New", "system_prompt": "Answer in French."},
        headers=alice["headers"],
    )

    assert response.status_code == 200
    assert response.json()["title"] == "New"
    assert response.json()["system_prompt"] == "Answer in French."

    response = await client.patch(f"/api/v1/chats/{chat['id']}", json={"system_prompt": ""}, headers=alice["headers"])
    assert response.json()["title"] == "New"
    assert response.json()["system_prompt"] is None


@pytest.mark.asyncio
async def test_add_message_updates_last_message(session, make_user):
    alice = await make_user("alice@example.com")
    user_id = alice["user"]["id"]
    chat = await ChatService.create_chat(session, user_id, "Notes")

    await ChatService.add_message(session, user_id, chat.id, "user", "one")
    await ChatService.add_message(session, user_id, chat.id, "assistant", "two")

    chat = await ChatService.get_chat(session, user_id, chat.id)
    messages = await ChatService.get_chat_messages(session, user_id, chat.id)
    assert chat.last_message == "two"
    assert [(m.role, m.content) for m in messages] == [("user", "one"), ("assistant", "two")]


@pytest.mark.asyncio
async def test_add_message_rejects_unknown_role(session, make_user):
    alice = await make_user("alice@example.com")
    chat = await ChatService.create_chat(session, alice["user"]["id"])

    with pytest.raises(HTTPException) as excinfo:
        await ChatService.add_message(session, alice["user"]["id"], chat.id, "system", "nope")
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_send_message_relays_history(client, make_user, fake_llm):
    alice = await make_user("alice@example.com")
    await client.put("/api/v1/settings", json={"api_key": "sk-or-test"}, headers=alice["headers"])
    chat = (
        await client.post("/api/v1/chats", json={"title": "Trip", "system_prompt": "Be brief."}, headers=alice["headers"])
    ).json()

    fake_llm.reply = "Pack light."
    first = await client.post(f"/api/v1/chats/{chat['id']}/messages", json={"content": "What to pack?"}, headers=alice["headers"])
    fake_llm.reply = "Yes, an umbrella."
    second = await client.post(f"/api/v1/chats/{chat['id']}/messages", json={"content": "Rain gear?"}, headers=alice["headers"])

    assert first.status_code == 201
    assert first.json()["assistant_message"]["content"] == "Pack light."
    assert second.json()["chat"]["last_message"] == "Yes, an umbrella."
    assert fake_llm.prompts[-1] == [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "What to pack?"},
        {"role": "assistant", "content": "Pack light."},
        {"role": "user", "content": "Rain gear?"},
    ]

    messages = (await client.get(f"/api/v1/chats/{chat['id']}/messages", headers=alice["headers"])).json()
    assert [m["content"] for m in messages] == ["What to pack?", "Pack light.", "Rain gear?", "Yes, an umbrella."]


@pytest.mark.asyncio
async def test_first_message_titles_default_chat(client, make_user, fake_llm):
    alice = await make_user("alice@example.com")
    await client.put("/api/v1/settings", json={"api_key": "sk-or-test"}, headers=alice["headers"])
    chat = (await client.post("/api/v1/chats", json={}, headers=alice["headers"])).json()

    response = await client.post(
        f"/api/v1/chats/{chat['id']}/messages", json={"content": "Plan a weekend in Lisbon"}, headers=alice["headers"]
    )

    assert response.json()["chat"]["title"] == "Plan a weekend in Lisbon"


@pytest.mark.asyncio
async def test_send_message_without_provider_key(client, make_user, fake_llm):
    alice = await make_user("alice@example.com")
    chat = (await client.post("/api/v1/chats", json={}, headers=alice["headers"])).json()

    response = await client.post(f"/api/v1/chats/{chat['id']}/messages", json={"content": "hi"}, headers=alice["headers"])

    assert response.status_code == 400
    assert fake_llm.prompts == []
    assert (await client.get(f"/api/v1/chats/{chat['id']}/messages", headers=alice["headers"])).json() == []


@pytest.mark.asyncio
async def test_send_message_provider_failure(client, make_user, fake_llm):
    """The user's turn is kept, no assistant turn is stored, and the caller gets 502"""
    alice = await make_user("alice@example.com")
    await client.put("/api/v1/settings", json={"api_key": "sk-or-test"}, headers=alice["headers"])
    chat = (await client.post("/api/v1/chats", json={}, headers=alice["headers"])).json()
    fake_llm.error = LLMError("LLM request failed: APIConnectionError: boom")

    response = await client.post(f"/api/v1/chats/{chat['id']}/messages", json={"content": "hi"}, headers=alice["headers"])

    assert response.status_code == 502
    messages = (await client.get(f"/api/v1/chats/{chat['id']}/messages", headers=alice["headers"])).json()
    assert [(m["role"], m["content"]) for m in messages] == [("user", "hi")]


@pytest.mark.asyncio
async def test_delete_chat_removes_messages(client, make_user, fake_llm):
    alice = await make_user("alice@example.com")
    await client.put("/api/v1/settings", json={"api_key": "sk-or-test"}, headers=alice["headers"])
    chat = (await client.post("/api/v1/chats", json={}, headers=alice["headers"])).json()
    await client.post(f"/api/v1/chats/{chat['id']}/messages", json={"content": "hi"}, headers=alice["headers"])

    response = await client.delete(f"/api/v1/chats/{chat['id']}", headers=alice["headers"])

    assert response.status_code == 204
    assert (await client.get(f"/api/v1/chats/{chat['id']}/messages", headers=alice["headers"])).status_code == 404
    assert (await client.get("/api/v1/chats", headers=alice["headers"])).json() == []


@pytest.mark.asyncio
async def test_blank_message_is_rejected(client, make_user, fake_llm):
    alice = await make_user("alice@example.com")
    await client.put("/api/v1/settings", json={"api_key": "sk-or-test"}, headers=alice["headers"])
    chat = (await client.post("/api/v1/chats", json={}, headers=alice["headers"])).json()

    response = await client.post(f"/api/v1/chats/{chat['id']}/messages", json={"content": "   "}, headers=alice["headers"])

    assert response.status_code == 422
    assert fake_llm.prompts == []
    assert (await client.get(f"/api/v1/chats/{chat['id']}/messages", headers=alice["headers"])).json() == []


@pytest.mark.asyncio
async def test_messages_with_equal_timestamps_keep_insertion_order(session, make_user):
    alice = await make_user("alice@example.com")
    user_id = alice["user"]["id"]
    chat = await ChatService.create_chat(session, user_id, "Same second")
    stamp = datetime(2026, 1, 1, 12, 0, 0)

    for content in ("first", "second", "third"):
        message = await ChatService.add_message(session, user_id, chat.id, "user", content)
        message.created_at = stamp
    await session.commit()

    messages = await ChatService.get_chat_messages(session, user_id, chat.id)
    assert [(m.position, m.content) for m in messages] == [(1, "first"), (2, "second"), (3, "third")]
