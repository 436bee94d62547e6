# file: controllers/notification.py

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from app import config
from app.models.notification import (
    DirectNotificationRequest,
    DirectNotificationResponse,
    FanOutReport,
    MessageEvent,
)
from app.services.chat_store import ChatStore, get_chat_store
from app.services.direct_dispatch import DirectDispatchError, send_direct_notification
from app.services.fan_out import handle_new_message
from app.services.push_sender import PushSender, get_push_sender

router = APIRouter()


def verify_trigger_key(x_api_key: Optional[str] = Header(default=None)):
    if config.TRIGGER_API_KEY and x_api_key != config.TRIGGER_API_KEY:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API Key")


@router.post("/chat-message", response_model=FanOutReport, dependencies=[Depends(verify_trigger_key)])
async def chat_message_created(
        event: MessageEvent,
        store: ChatStore = Depends(get_chat_store),
        sender: PushSender = Depends(get_push_sender),
):
    """
    Called by the trigger when a message is created under a chat.
    Notifies every participant except the sender. Always answers 200 with
    the per-recipient report so the trigger does not redeliver.
    """
    return await handle_new_message(store, sender, event)


@router.post("/direct", response_model=DirectNotificationResponse)
async def send_direct(
        request: DirectNotificationRequest,
        sender: PushSender = Depends(get_push_sender),
):
    """
    Sends one notification straight to the given FCM token.
    """
    try:
        return await send_direct_notification(sender, request)
    except DirectDispatchError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
