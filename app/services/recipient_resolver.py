import logging
from typing import List, Optional

from app.services.chat_store import ChatStore

logger = logging.getLogger(__name__)


async def resolve_recipients(store: ChatStore, chat_id: str, sender_id: Optional[str]) -> List[str]:
    """
    Returns the chat participants minus the sender.
    A missing chat or a chat without participants yields an empty list.
    Store errors are left to the caller.
    """
    chat = await store.get_chat(chat_id)
    if chat is None:
        logger.info(f"Chat {chat_id} does not exist, nothing to notify")
        return []
    if not chat.participants:
        logger.info(f"Chat {chat_id} has no participants, nothing to notify")
        return []

    recipients = []
    for uid in chat.participants:
        if uid != sender_id and uid not in recipients:
            recipients.append(uid)

    logger.info(f"Chat {chat_id}: {len(recipients)} recipient(s): {', '.join(recipients)}")
    return recipients
