"""
Bearer-token identity for the alternate auth mode.
Tokens are Firebase ID tokens; verification is delegated to firebase-admin.
"""
import asyncio
import json
from typing import Optional
import firebase_admin
from firebase_admin import auth, credentials
from hintgate.errors import AuthError
from hintgate.utils.logger import logger

FIREBASE_APP_NAME = "hintgate"


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Returns the token from "Bearer <token>", or None for anything else."""
    if not auth_header or not isinstance(auth_header, str):
        return None

    parts = auth_header.split(" ")
    if len(parts) == 2 and parts[0] == "Bearer" and parts[1]:
        return parts[1]

    return None


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens. The Firebase app is initialized on first use."""

    def __init__(self, service_account_json: Optional[str], project_id: Optional[str] = None):
        self.service_account_json = service_account_json
        self.project_id = project_id
        self._app = None

    def _initialize(self):
        if self._app is not None:
            return self._app

        if not self.service_account_json:
            logger.warning("FIREBASE_SERVICE_ACCOUNT not found. JWT verification will fail.")
            return None

        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
            return self._app
        except ValueError:
            pass  # Not initialized yet in this process

        try:
            service_account = json.loads(self.service_account_json)
            options = {"projectId": self.project_id} if self.project_id else None
            self._app = firebase_admin.initialize_app(
                credentials.Certificate(service_account), options, name=FIREBASE_APP_NAME
            )
            logger.info("Firebase Admin initialized.")
        except Exception as e:
            logger.error(f"Firebase Admin initialization failed: {str(e)}")
            return None
        return self._app

    async def verify(self, token: str) -> str:
        """Returns the uid behind a valid token, raises AuthError otherwise."""
        app = self._initialize()
        if app is None:
            raise AuthError("Firebase not initialized", code="INVALID_TOKEN")

        try:
            decoded = await asyncio.to_thread(auth.verify_id_token, token, app)
        except Exception as e:
            logger.error(f"JWT verification failed: {str(e)}")
            code = getattr(e, "code", None)
            raise AuthError("Invalid or expired token",
                            code=code if isinstance(code, str) else "INVALID_TOKEN") from e
        return decoded["uid"]
