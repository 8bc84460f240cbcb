# app/services/identity_service.py
"""
Identity Resolver: turns a Firebase ID token into a verified subject.
Verification itself is delegated to firebase-admin; this module only
adapts its result and folds every failure mode into InvalidCredential.
"""

from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from app.config import Settings
from app.services.exceptions import InvalidCredential
from app.utils.logger import get_logger

logger = get_logger(__name__)

FIREBASE_APP_NAME = "maintenance-ledger"


@dataclass
class VerifiedSubject:
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


class FirebaseIdentityResolver:
    """Verifies ID tokens against one initialised firebase_admin App."""

    def __init__(self, firebase_app: firebase_admin.App):
        self.firebase_app = firebase_app

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirebaseIdentityResolver":
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
        firebase_app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
        logger.info(f"Firebase app initialised for project '{settings.FIREBASE_PROJECT_ID}'")
        return cls(firebase_app)

    def resolve(self, token: str) -> VerifiedSubject:
        try:
            decoded = auth.verify_id_token(token, app=self.firebase_app)
        except (ValueError, FirebaseError) as e:
            # ValueError covers empty/malformed tokens; FirebaseError covers
            # bad signature, expiry, revocation and certificate fetch failures
            logger.warning(f"Firebase token rejected: {type(e).__name__}")
            raise InvalidCredential("Invalid Firebase token") from e

        return VerifiedSubject(
            uid=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name"),
            picture=decoded.get("picture"),
        )

    def close(self):
        firebase_admin.delete_app(self.firebase_app)
