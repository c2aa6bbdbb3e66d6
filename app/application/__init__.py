"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (document store, identity,
storage, push, mail).
"""

from app.application.interfaces import (
    IDocumentStore,
    IIdentityProvider,
    IMailer,
    IObjectStorage,
    IPushGateway,
)
from app.application.services import (
    AudioService,
    AuthorizationService,
    AuthService,
    DonationService,
    EventService,
    LiveService,
    PostService,
    SermonService,
    StatsService,
    UserService,
)

__all__ = [
    "AudioService",
    "AuthService",
    "AuthorizationService",
    "DonationService",
    "EventService",
    "IDocumentStore",
    "IIdentityProvider",
    "IMailer",
    "IObjectStorage",
    "IPushGateway",
    "LiveService",
    "PostService",
    "SermonService",
    "StatsService",
    "UserService",
]
