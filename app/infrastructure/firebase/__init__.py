"""Firebase integration over REST: Firestore, Auth, Cloud Messaging."""

from app.infrastructure.firebase.client import (
    FirebaseCredentials,
    load_firebase_credentials,
)

__all__ = [
    "FirebaseCredentials",
    "load_firebase_credentials",
]
