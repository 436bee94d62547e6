from typing import Dict, Optional

from firebase_admin import messaging

from app.config import (
    CLICK_ACTION,
    DEFAULT_SENDER_NAME,
    NOTIFICATION_CALL_TO_ACTION,
    NOTIFICATION_CHANNEL_ID,
    NOTIFICATION_ICON,
    NOTIFICATION_PRIORITY,
    NOTIFICATION_TITLE_TEMPLATE,
)
from app.models.notification import MessageEvent, NotificationContent


def resolve_content(event: MessageEvent) -> NotificationContent:
    """Applies the defaults for the optional message fields in one place."""
    return NotificationContent(
        sender_name=event.sender_name or DEFAULT_SENDER_NAME,
        message_text=event.text or "",
        sender_email=event.sender_email,
    )


def format_title(sender_name: str) -> str:
    return NOTIFICATION_TITLE_TEMPLATE.format(sender_name=sender_name)


def _android_config() -> messaging.AndroidConfig:
    return messaging.AndroidConfig(
        notification=messaging.AndroidNotification(
            channel_id=NOTIFICATION_CHANNEL_ID,
            priority=NOTIFICATION_PRIORITY,
            default_sound=True,
            icon=NOTIFICATION_ICON,
        )
    )


def _build_message(token: str, title: str, body: str, data: Dict[str, str]) -> messaging.Message:
    return messaging.Message(
        token=token,
        notification=messaging.Notification(title=title, body=body),
        android=_android_config(),
        data=data,
    )


def build_chat_message(token: str, content: NotificationContent, chat_id: str, message_id: str) -> messaging.Message:
    # Data keys are read by the mobile client; keep them stable.
    data = {
        "chatId": chat_id,
        "messageId": message_id,
        "click_action": CLICK_ACTION,
        "senderName": content.sender_name,
        "senderEmail": content.sender_email or "",
    }
    return _build_message(token, format_title(content.sender_name), NOTIFICATION_CALL_TO_ACTION, data)


def build_direct_message(token: str, sender_name: Optional[str], message: Optional[str]) -> messaging.Message:
    sender_name = sender_name or DEFAULT_SENDER_NAME
    data = {
        "senderName": sender_name,
        "click_action": CLICK_ACTION,
    }
    return _build_message(token, format_title(sender_name), message or "", data)
