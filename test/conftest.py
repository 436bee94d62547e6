import os

import pytest

os.environ["TESTING"] = "True"

from app.models.notification import ChatRecord, UserProfile


# === Fakes for the store and push boundaries ===
class FakeChatStore:
    def __init__(self, chats=None, users=None, fail_users=None, fail_chats=False):
        self.chats = chats or {}
        self.users = users or {}
        self.fail_users = set(fail_users or [])
        self.fail_chats = fail_chats
        self.profile_reads = []

    async def get_chat(self, chat_id):
        if self.fail_chats:
            raise ConnectionError("store unreachable")
        if chat_id not in self.chats:
            return None
        return ChatRecord(chat_id=chat_id, participants=self.chats[chat_id])

    async def get_user_profile(self, user_id):
        self.profile_reads.append(user_id)
        if user_id in self.fail_users:
            raise ConnectionError(f"lookup failed for {user_id}")
        data = self.users.get(user_id)
        if data is None:
            return None
        return UserProfile.from_document(user_id, data)


class FakePushSender:
    def __init__(self, reject_tokens=None):
        self.reject_tokens = set(reject_tokens or [])
        self.sent = []

    async def send(self, message):
        self.sent.append(message)
        if message.token in self.reject_tokens:
            raise RuntimeError(f"Requested entity was not found: {message.token}")
        return f"projects/test/messages/{len(self.sent)}"


# === Test Fixtures ===
@pytest.fixture
def chat_store():
    """Chat c1 with three participants; only u2 can receive pushes."""
    return FakeChatStore(
        chats={"c1": ["u1", "u2", "u3"]},
        users={
            "u1": {"fcmToken": "T1"},
            "u2": {"fcmToken": "T2", "notificationsEnabled": True},
            "u3": {},
        },
    )


@pytest.fixture
def push_sender():
    return FakePushSender()


@pytest.fixture
def message_event_data():
    return {
        "chatId": "c1",
        "messageId": "m1",
        "sender": "u1",
        "senderName": "Jana",
        "text": "Ahoj!",
        "senderEmail": "jana@example.com",
    }
