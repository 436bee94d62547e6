import logging
import os

import firebase_admin
from firebase_admin import credentials

from app.config import FIREBASE_CREDENTIALS

logger = logging.getLogger(__name__)


def initialize_firebase() -> firebase_admin.App:
    """
    Initializes the default Firebase Admin app once per process.
    Uses the service account file when present, otherwise falls back to
    application default credentials (e.g. when running on Google Cloud).
    """
    # Singleton pattern: Check if the app is already initialized
    if firebase_admin._apps:
        return firebase_admin.get_app()

    if os.path.exists(FIREBASE_CREDENTIALS):
        cred = credentials.Certificate(FIREBASE_CREDENTIALS)
        logger.info(f"Initializing Firebase Admin SDK from {FIREBASE_CREDENTIALS}")
    else:
        cred = credentials.ApplicationDefault()
        logger.info("Initializing Firebase Admin SDK with application default credentials")
    return firebase_admin.initialize_app(cred)
