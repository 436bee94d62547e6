import logging
from typing import Protocol

from firebase_admin import messaging

logger = logging.getLogger(__name__)


class PushSender(Protocol):
    """Push-delivery boundary: returns the provider message id or raises."""

    async def send(self, message: messaging.Message) -> str:
        ...


class FcmPushSender:
    """Sends messages through Firebase Cloud Messaging without blocking the event loop."""

    def __init__(self, app=None, dry_run: bool = False):
        self.app = app
        self.dry_run = dry_run

    async def send(self, message: messaging.Message) -> str:
        batch = await messaging.send_each_async([message], dry_run=self.dry_run, app=self.app)
        response = batch.responses[0]
        if not response.success:
            raise response.exception
        return response.message_id


_default_sender = None


def get_push_sender() -> PushSender:
    """FastAPI dependency returning the shared FCM sender."""
    global _default_sender
    if _default_sender is None:
        _default_sender = FcmPushSender()
    return _default_sender
