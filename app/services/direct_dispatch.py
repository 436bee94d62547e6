import logging

from app.models.notification import DirectNotificationRequest, DirectNotificationResponse
from app.services.notification_builder import build_direct_message
from app.services.push_sender import PushSender

logger = logging.getLogger(__name__)


class DirectDispatchError(Exception):
    """Raised when a direct notification could not be handed to the provider."""


async def send_direct_notification(sender: PushSender, request: DirectNotificationRequest) -> DirectNotificationResponse:
    """
    Sends a single notification from caller-supplied data, no store lookups.
    A missing token is a no-op; a provider failure raises DirectDispatchError.
    """
    if not request.fcm_token:
        logger.info("Direct notification without FCM token, nothing sent")
        return DirectNotificationResponse(success=False)

    logger.info(f"Direct notification from {request.sender_name} to token {request.fcm_token[:8]}...")
    try:
        message = build_direct_message(request.fcm_token, request.sender_name, request.message)
        response = await sender.send(message)
    except Exception as e:
        logger.error(f"Error sending direct notification: {e}")
        raise DirectDispatchError("Failed to send notification") from e

    logger.info(f"Direct notification sent, message id: {response}")
    return DirectNotificationResponse(success=True, message_id=response)
