import asyncio
import logging
from typing import List, Optional

from app.config import MAX_CONCURRENT_DISPATCHES
from app.models.notification import (
    DispatchOutcome,
    DispatchStatus,
    FanOutReport,
    MessageEvent,
    NotificationContent,
    UserProfile,
)
from app.services.chat_store import ChatStore
from app.services.notification_builder import build_chat_message, resolve_content
from app.services.push_sender import PushSender
from app.services.recipient_resolver import resolve_recipients

logger = logging.getLogger(__name__)


def check_eligibility(profile: Optional[UserProfile]) -> Optional[DispatchStatus]:
    """
    Eligibility gate. Returns the skip status for an ineligible recipient,
    or None when a push may be sent. A missing preference flag means enabled.
    """
    if profile is None or not profile.fcm_token:
        return DispatchStatus.SKIPPED_NO_TOKEN
    if profile.notifications_enabled is False:
        return DispatchStatus.SKIPPED_DISABLED
    return None


async def dispatch_to_recipient(
        store: ChatStore,
        sender: PushSender,
        recipient_id: str,
        content: NotificationContent,
        chat_id: str,
        message_id: str,
) -> DispatchOutcome:
    """Loads one recipient, applies the gate and sends. Never raises."""
    try:
        profile = await store.get_user_profile(recipient_id)

        skip = check_eligibility(profile)
        if skip == DispatchStatus.SKIPPED_NO_TOKEN:
            logger.info(f"User {recipient_id} has no FCM token, skipping")
            return DispatchOutcome(recipient_id=recipient_id, status=skip)
        if skip == DispatchStatus.SKIPPED_DISABLED:
            logger.info(f"User {recipient_id} has notifications disabled, skipping")
            return DispatchOutcome(recipient_id=recipient_id, status=skip)

        logger.info(f"Sending notification to {recipient_id} (token {profile.fcm_token[:8]}...)")
        message = build_chat_message(profile.fcm_token, content, chat_id, message_id)
        response = await sender.send(message)
    except Exception as e:
        logger.error(f"Failed to send notification to {recipient_id}: {e}")
        return DispatchOutcome(recipient_id=recipient_id, status=DispatchStatus.FAILED, error=str(e))

    logger.info(f"Notification sent to {recipient_id}, message id: {response}")
    return DispatchOutcome(recipient_id=recipient_id, status=DispatchStatus.SENT, message_id=response)


async def fan_out(
        store: ChatStore,
        sender: PushSender,
        recipients: List[str],
        content: NotificationContent,
        chat_id: str,
        message_id: str,
        max_concurrency: int = 0,
) -> List[DispatchOutcome]:
    """
    Dispatches to every recipient concurrently and waits for all of them.
    With max_concurrency > 0 at most that many recipients are in flight.
    """
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    async def run(recipient_id: str) -> DispatchOutcome:
        if semaphore is None:
            return await dispatch_to_recipient(store, sender, recipient_id, content, chat_id, message_id)
        async with semaphore:
            return await dispatch_to_recipient(store, sender, recipient_id, content, chat_id, message_id)

    return list(await asyncio.gather(*(run(uid) for uid in recipients)))


async def handle_new_message(
        store: ChatStore,
        sender: PushSender,
        event: Optional[MessageEvent],
        max_concurrency: Optional[int] = None,
) -> FanOutReport:
    """
    Entry point for a newly created chat message.
    Always returns a report; errors are logged and reported, never raised,
    so the trigger infrastructure does not retry the event.
    """
    if event is None:
        logger.info("No message data in event, nothing to do")
        return FanOutReport(status="ignored")

    if max_concurrency is None:
        max_concurrency = MAX_CONCURRENT_DISPATCHES

    report = FanOutReport(chat_id=event.chat_id, message_id=event.message_id)
    try:
        content = resolve_content(event)
        logger.info(
            f"New message {event.message_id} in chat {event.chat_id} "
            f"from {content.sender_name} ({event.sender_id})"
        )

        report.recipients = await resolve_recipients(store, event.chat_id, event.sender_id)
        if report.recipients:
            report.outcomes = await fan_out(
                store, sender, report.recipients, content,
                event.chat_id, event.message_id, max_concurrency,
            )
    except Exception as e:
        logger.exception(f"Error while processing notifications for chat {event.chat_id}")
        report.status = "failed"
        report.error = str(e)
        return report

    logger.info(
        f"Finished chat {event.chat_id}: sent={report.sent_count} "
        f"skipped={report.skipped_count} failed={report.failed_count}"
    )
    return report
