# file: scripts/message_listener.py

import asyncio
import logging

from firebase_admin import firestore
from google.cloud.firestore_v1.watch import ChangeType
from pydantic import ValidationError

from app.config import CHATS_COLLECTION, LOG_LEVEL, MAX_CONCURRENT_DISPATCHES, MESSAGES_COLLECTION
from app.models.notification import MessageEvent
from app.services.chat_store import FirestoreChatStore
from app.services.fan_out import handle_new_message
from app.services.firebase_app import initialize_firebase
from app.services.push_sender import FcmPushSender

logger = logging.getLogger(__name__)


class MessageListener:
    """
    Watches chats/{chatId}/messages for new documents and runs the
    notification pipeline for each one on the given event loop.

    Firestore delivers the current contents of the collection group as the
    first snapshot; those messages already existed and are not notified.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, store, sender, max_concurrency: int = 0):
        self.loop = loop
        self.store = store
        self.sender = sender
        self.max_concurrency = max_concurrency
        self._initial_snapshot_seen = False

    def on_snapshot(self, docs, changes, read_time):
        # Called from the Firestore watch thread.
        if not self._initial_snapshot_seen:
            self._initial_snapshot_seen = True
            logger.info(f"Listening for new messages ({len(docs)} existing messages ignored)")
            return

        for change in changes:
            if change.type != ChangeType.ADDED:
                continue
            try:
                event = event_from_snapshot(change.document)
            except ValidationError as e:
                logger.warning(f"Ignoring malformed message {change.document.id}: {e}")
                continue
            if event is None:
                continue
            asyncio.run_coroutine_threadsafe(
                handle_new_message(self.store, self.sender, event, self.max_concurrency),
                self.loop,
            )


def event_from_snapshot(document):
    """Builds a MessageEvent from a message snapshot, or None if it is not under a chat."""
    chat_ref = document.reference.parent.parent
    if chat_ref is None or chat_ref.parent.id != CHATS_COLLECTION:
        return None
    return MessageEvent.from_document(chat_ref.id, document.id, document.to_dict())


async def main_listener_loop():
    """Keeps the watch open until the process is stopped."""
    initialize_firebase()
    listener = MessageListener(
        asyncio.get_running_loop(),
        FirestoreChatStore(),
        FcmPushSender(),
        MAX_CONCURRENT_DISPATCHES,
    )
    watch = firestore.client().collection_group(MESSAGES_COLLECTION).on_snapshot(listener.on_snapshot)
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        watch.unsubscribe()


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    logger.info("Starting chat message listener...")
    asyncio.run(main_listener_loop())
