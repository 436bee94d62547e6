import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# --- SETUP: Set a testing flag before importing app components ---
os.environ["TESTING"] = "True"

# --- App Imports ---
from main import app
from app import config
from app.services.chat_store import get_chat_store
from app.services.push_sender import get_push_sender

from conftest import FakeChatStore, FakePushSender


# --- CORE FIXTURES ---

@pytest_asyncio.fixture(scope="function")
async def client(chat_store: FakeChatStore, push_sender: FakePushSender) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_chat_store] = lambda: chat_store
    app.dependency_overrides[get_push_sender] = lambda: push_sender
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_itc_001_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Chat Notifications API is running"}


@pytest.mark.asyncio
async def test_itc_002_chat_message_fans_out(client: AsyncClient, push_sender, message_event_data):
    """Chat c1 (u1, u2, u3), sender u1: only u2 has a token."""
    response = await client.post("/api/notifications/chat-message", json=message_event_data)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["recipients"] == ["u2", "u3"]
    statuses = {o["recipient_id"]: o["status"] for o in data["outcomes"]}
    assert statuses == {"u2": "sent", "u3": "skipped_no_token"}
    assert {o["recipient_id"]: o["success"] for o in data["outcomes"]} == {"u2": True, "u3": False}
    assert [m.token for m in push_sender.sent] == ["T2"]


@pytest.mark.asyncio
async def test_itc_003_missing_chat_is_not_an_error(client: AsyncClient, push_sender, message_event_data):
    response = await client.post("/api/notifications/chat-message",
                                 json={**message_event_data, "chatId": "missing"})

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["outcomes"] == []
    assert push_sender.sent == []


@pytest.mark.asyncio
async def test_itc_004_store_failure_still_answers_200(client: AsyncClient, chat_store, message_event_data):
    chat_store.fail_chats = True
    response = await client.post("/api/notifications/chat-message", json=message_event_data)

    assert response.status_code == 200
    assert response.json()["status"] == "failed"


@pytest.mark.asyncio
async def test_itc_005_provider_failure_reported_per_recipient(client: AsyncClient, chat_store, push_sender,
                                                               message_event_data):
    chat_store.chats["c1"] = ["u1", "u2", "u4"]
    chat_store.users["u4"] = {"fcmToken": "T4"}
    push_sender.reject_tokens.add("T2")

    response = await client.post("/api/notifications/chat-message", json=message_event_data)

    assert response.status_code == 200
    statuses = {o["recipient_id"]: o["status"] for o in response.json()["outcomes"]}
    assert statuses == {"u2": "failed", "u4": "sent"}


@pytest.mark.asyncio
async def test_itc_006_chat_message_requires_key_when_configured(client: AsyncClient, mocker,
                                                                 message_event_data):
    mocker.patch.object(config, "TRIGGER_API_KEY", "trigger-secret")

    response = await client.post("/api/notifications/chat-message", json=message_event_data)
    assert response.status_code == 401

    response = await client.post("/api/notifications/chat-message", json=message_event_data,
                                 headers={"X-Api-Key": "trigger-secret"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_itc_007_chat_message_validation(client: AsyncClient):
    response = await client.post("/api/notifications/chat-message", json={"sender": "u1"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_itc_008_direct_without_token(client: AsyncClient, push_sender):
    response = await client.post("/api/notifications/direct", json={"senderName": "Jana", "message": "Hi"})

    assert response.status_code == 200
    assert response.json() == {"success": False, "message_id": None}
    assert push_sender.sent == []


@pytest.mark.asyncio
async def test_itc_009_direct_success(client: AsyncClient, push_sender):
    response = await client.post("/api/notifications/direct",
                                 json={"senderName": "Jana", "message": "Hi", "fcmToken": "T9"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message_id": "projects/test/messages/1"}
    assert push_sender.sent[0].token == "T9"


@pytest.mark.asyncio
async def test_itc_010_direct_provider_rejection_is_internal_error(client: AsyncClient, push_sender):
    push_sender.reject_tokens.add("BAD")
    response = await client.post("/api/notifications/direct",
                                 json={"senderName": "Jana", "message": "Hi", "fcmToken": "BAD"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to send notification"
