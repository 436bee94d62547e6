from typing import Optional, Protocol

from firebase_admin import firestore_async

from app.config import CHATS_COLLECTION, USERS_COLLECTION
from app.models.notification import ChatRecord, UserProfile


class ChatStore(Protocol):
    """Point reads the notification pipeline needs from the document store."""

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        ...

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        ...


class FirestoreChatStore:
    """ChatStore backed by the Firestore async client."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        # Created lazily so the Firebase app can be initialized first.
        if self._client is None:
            self._client = firestore_async.client()
        return self._client

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        snapshot = await self.client.collection(CHATS_COLLECTION).document(chat_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return ChatRecord(chat_id=chat_id, participants=data.get("participants"))

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        snapshot = await self.client.collection(USERS_COLLECTION).document(user_id).get()
        if not snapshot.exists:
            return None
        return UserProfile.from_document(user_id, snapshot.to_dict())


_default_store: Optional[FirestoreChatStore] = None


def get_chat_store() -> ChatStore:
    """FastAPI dependency returning the shared Firestore store."""
    global _default_store
    if _default_store is None:
        _default_store = FirestoreChatStore()
    return _default_store
