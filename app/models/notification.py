# file: models/notification.py

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def _blank_to_none(token: Optional[str]) -> Optional[str]:
    if token is not None and not token.strip():
        return None
    return token


class MessageEvent(BaseModel):
    """A newly created chat message, as delivered by the trigger."""
    model_config = ConfigDict(populate_by_name=True)

    chat_id: str = Field(alias="chatId")
    message_id: str = Field(alias="messageId")
    sender_id: Optional[str] = Field(default=None, alias="sender")
    sender_name: Optional[str] = Field(default=None, alias="senderName")
    text: Optional[str] = None
    sender_email: Optional[str] = Field(default=None, alias="senderEmail")

    @classmethod
    def from_document(cls, chat_id: str, message_id: str, data: Optional[Dict[str, Any]]) -> "MessageEvent":
        data = data or {}
        return cls(
            chat_id=chat_id,
            message_id=message_id,
            sender_id=data.get("sender"),
            sender_name=data.get("senderName"),
            text=data.get("text"),
            sender_email=data.get("senderEmail"),
        )


class ChatRecord(BaseModel):
    chat_id: str
    # None when the document has no participants field at all
    participants: Optional[List[str]] = None


class UserProfile(BaseModel):
    user_id: str
    fcm_token: Optional[str] = None
    notifications_enabled: Optional[bool] = None

    @field_validator("fcm_token")
    def blank_token_is_missing(cls, v):
        return _blank_to_none(v)

    @classmethod
    def from_document(cls, user_id: str, data: Optional[Dict[str, Any]]) -> "UserProfile":
        data = data or {}
        return cls(
            user_id=user_id,
            fcm_token=data.get("fcmToken"),
            notifications_enabled=data.get("notificationsEnabled"),
        )


class NotificationContent(BaseModel):
    """Notification content after optional-field defaults are applied."""
    sender_name: str
    message_text: str
    sender_email: Optional[str] = None


class DispatchStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED_NO_TOKEN = "skipped_no_token"
    SKIPPED_DISABLED = "skipped_disabled"


class DispatchOutcome(BaseModel):
    recipient_id: str
    status: DispatchStatus
    message_id: Optional[str] = None
    error: Optional[str] = None

    @computed_field
    @property
    def success(self) -> bool:
        return self.status == DispatchStatus.SENT

    @property
    def skipped(self) -> bool:
        return self.status in (DispatchStatus.SKIPPED_NO_TOKEN, DispatchStatus.SKIPPED_DISABLED)


class FanOutReport(BaseModel):
    chat_id: Optional[str] = None
    message_id: Optional[str] = None
    status: Literal["completed", "ignored", "failed"] = "completed"
    recipients: List[str] = []
    outcomes: List[DispatchOutcome] = []
    error: Optional[str] = None

    @property
    def sent_count(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == DispatchStatus.FAILED)


class DirectNotificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender_name: Optional[str] = Field(default=None, alias="senderName")
    message: Optional[str] = None
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")

    @field_validator("fcm_token")
    def blank_token_is_missing(cls, v):
        return _blank_to_none(v)


class DirectNotificationResponse(BaseModel):
    success: bool
    message_id: Optional[str] = None
