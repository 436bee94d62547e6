import os
from dotenv import load_dotenv

load_dotenv()

FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json")

# Firestore layout
CHATS_COLLECTION = os.getenv("CHATS_COLLECTION", "chats")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")
MESSAGES_COLLECTION = os.getenv("MESSAGES_COLLECTION", "messages")

# Android notification channel settings. The app registers this channel on the device.
NOTIFICATION_CHANNEL_ID = os.getenv("NOTIFICATION_CHANNEL_ID", "chat_messages")
NOTIFICATION_PRIORITY = os.getenv("NOTIFICATION_PRIORITY", "max")
NOTIFICATION_ICON = os.getenv("NOTIFICATION_ICON", "@drawable/ic_notification")
CLICK_ACTION = os.getenv("CLICK_ACTION", "FLUTTER_NOTIFICATION_CLICK")

DEFAULT_SENDER_NAME = os.getenv("DEFAULT_SENDER_NAME", "Neznámý uživatel")
NOTIFICATION_TITLE_TEMPLATE = os.getenv("NOTIFICATION_TITLE_TEMPLATE", "{sender_name} Vám posílá zprávu")
NOTIFICATION_CALL_TO_ACTION = os.getenv("NOTIFICATION_CALL_TO_ACTION", "Klikněte pro zobrazení zprávy")

# 0 = no cap on concurrent recipient tasks
MAX_CONCURRENT_DISPATCHES = int(os.getenv("MAX_CONCURRENT_DISPATCHES", "0"))

TRIGGER_API_KEY = os.getenv("TRIGGER_API_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
