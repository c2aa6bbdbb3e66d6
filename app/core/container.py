"""Dependency container: adapters and services wired once at startup.

The lifespan builds a Container from settings and stores it on
app.state.container; route dependencies read it from there. Tests build one
from in-memory adapters with Container.from_adapters().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

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
from app.domain.exceptions import ConfigurationException

if TYPE_CHECKING:
    from app.application.interfaces import (
        IDocumentStore,
        IIdentityProvider,
        IMailer,
        IObjectStorage,
        IPushGateway,
    )
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class Container:
    """Holds the adapters and one instance of every service."""

    def __init__(
        self,
        settings: "Settings",
        *,
        db: "IDocumentStore",
        identity: "IIdentityProvider",
        storage: "IObjectStorage",
        push: "IPushGateway",
        mailer: "IMailer",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.db = db
        self.identity = identity
        self.storage = storage
        self.push = push
        self.mailer = mailer
        self._http_client = http_client

        self.authz = AuthorizationService()
        content_deps = {"storage": storage, "push": push, "authz": self.authz}
        self.audios = AudioService(db, settings, **content_deps)
        self.sermons = SermonService(db, settings, **content_deps)
        self.events = EventService(db, settings, **content_deps)
        self.posts = PostService(db, settings, **content_deps)
        self.live = LiveService(db, settings, push=push, authz=self.authz)
        self.donations = DonationService(db, settings, authz=self.authz)
        self.stats = StatsService(db)
        self.users = UserService(db, settings, identity=identity, mailer=mailer, push=push)
        self.auth = AuthService(db, settings, identity=identity, mailer=mailer, authz=self.authz)

    @classmethod
    def from_adapters(
        cls,
        settings: "Settings",
        *,
        db: "IDocumentStore",
        identity: "IIdentityProvider",
        storage: "IObjectStorage",
        push: "IPushGateway",
        mailer: "IMailer",
    ) -> "Container":
        """Build from ready-made adapters (no shared HTTP client to close)."""
        return cls(
            settings,
            db=db,
            identity=identity,
            storage=storage,
            push=push,
            mailer=mailer,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Container":
        """Build the Firebase-backed adapters around one shared HTTP client.

        Raises:
            ConfigurationException: No service account, or storage misconfigured.
        """
        from app.infrastructure.external.email import SmtpMailer
        from app.infrastructure.external.storage import StorageFactory
        from app.infrastructure.firebase import load_firebase_credentials
        from app.infrastructure.firebase.auth_client import FirebaseAuthClient
        from app.infrastructure.firebase.client import create_firestore_client
        from app.infrastructure.firebase.messaging import FcmPushGateway

        credentials = load_firebase_credentials(settings)
        if credentials is None:
            raise ConfigurationException(
                "Firebase service account is not configured "
                "(FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH)"
            )

        http_client = httpx.AsyncClient(timeout=30.0)
        try:
            storage = StorageFactory.create_storage_service(
                settings, firebase=credentials, http_client=http_client
            )
        except ValueError as e:
            raise ConfigurationException(str(e)) from e

        logger.info(
            "Container ready (project=%s, storage=%s)",
            credentials.project_id,
            settings.storage_backend,
        )
        return cls(
            settings,
            db=create_firestore_client(credentials, http_client),
            identity=FirebaseAuthClient(
                credentials, settings.firebase_api_key.get_secret_value(), http_client
            ),
            storage=storage,
            push=FcmPushGateway(credentials, http_client),
            mailer=SmtpMailer(settings),
            http_client=http_client,
        )

    async def aclose(self) -> None:
        """Close the shared HTTP client, if this container created one."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
