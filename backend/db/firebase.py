"""Firebase app bootstrap shared by Firestore, Storage and Auth."""

import base64
import json
import logging
import os

import firebase_admin
from firebase_admin import credentials

from config import get_settings

logger = logging.getLogger(__name__)


def load_firebase_credentials(creds_value: str) -> dict:
    """Load Firebase credentials from JSON string, file path, or base64."""
    if os.path.isfile(creds_value):
        with open(creds_value) as f:
            return json.load(f)

    try:
        return json.loads(creds_value)
    except json.JSONDecodeError:
        pass

    try:
        decoded = base64.b64decode(creds_value, validate=True).decode("utf-8")
        return json.loads(decoded)
    except (ValueError, UnicodeDecodeError):
        pass

    raise ValueError("FIREBASE_CREDENTIALS is not valid JSON, file path, or base64")


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    settings = get_settings()
    creds_dict = load_firebase_credentials(settings.firebase_credentials)
    app = firebase_admin.initialize_app(
        credentials.Certificate(creds_dict),
        {"storageBucket": settings.firebase_storage_bucket},
    )
    logger.info("Firebase app initialized for project %s", creds_dict.get("project_id"))
    return app
