import json
import logging
import os

import firebase_admin
from dotenv import load_dotenv
from firebase_admin import auth as firebase_auth, credentials, firestore

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def initialize_firebase():
    """Initialize Firebase Admin SDK once, on first use."""
    if firebase_admin._apps:
        return

    # Method 1: Service Account Key from Environment Variable (Recommended for production)
    service_account_key_json = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY")
    if service_account_key_json:
        try:
            service_account_info = json.loads(service_account_key_json)
        except json.JSONDecodeError as e:
            logger.error("Error parsing FIREBASE_SERVICE_ACCOUNT_KEY: %s", e)
        else:
            firebase_admin.initialize_app(credentials.Certificate(service_account_info))
            logger.info("Firebase Admin SDK initialized with Service Account Key from environment variable.")
            return

    # Method 2: Service Account Key File (for local development only)
    service_account_key_path = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY_PATH")
    if service_account_key_path and os.path.exists(service_account_key_path):
        firebase_admin.initialize_app(credentials.Certificate(service_account_key_path))
        logger.info("Firebase Admin SDK initialized with Service Account Key from file path.")
        return

    # Method 3: GOOGLE_APPLICATION_CREDENTIALS / Application Default Credentials
    firebase_admin.initialize_app()
    logger.info("Firebase Admin SDK initialized with Application Default Credentials.")


def verify_id_token(token: str) -> dict:
    initialize_firebase()
    return firebase_auth.verify_id_token(token)


def get_firestore_client():
    initialize_firebase()
    return firestore.client()
