"""Pytest configuration and fixtures for the Voice Of Faith API.

HTTP tests run app.main:app through ASGITransport with a Container built
from the in-memory adapters in tests/fakes.py, so no Firebase project,
SMTP relay or network is needed.
"""

import os

# The limiter and settings read the environment at import time.
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.application.dtos.user import CurrentUser  # noqa: E402
from app.core.config import Settings, get_settings  # noqa: E402
from app.core.container import Container  # noqa: E402
from app.main import app  # noqa: E402
from app.shared.utils.datetime import utc_now  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeIdentityProvider,
    FakeMailer,
    FakeObjectStorage,
    FakePushGateway,
    InMemoryDocumentStore,
)

get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def push() -> FakePushGateway:
    return FakePushGateway()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def container(settings, store, identity, storage, push, mailer) -> Container:
    return Container.from_adapters(
        settings, db=store, identity=identity, storage=storage, push=push, mailer=mailer
    )


@pytest.fixture
async def client(container: Container) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) using the in-memory container."""
    previous = getattr(app.state, "container", None)
    app.state.container = container
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.container = previous


@pytest.fixture
def make_user(store: InMemoryDocumentStore, identity: FakeIdentityProvider):
    """Factory: create an identity account plus profile and return a CurrentUser.

    The returned user's bearer token is "token-<uid>".
    """

    def _make(role: str, email: str | None = None, display_name: str | None = None) -> CurrentUser:
        email = email or f"{role}-{len(identity.users) + 1}@example.com"
        uid = identity.add_account(email)
        identity.issue_token(uid)
        profile = {
            "email": email,
            "displayName": display_name or role.title(),
            "role": role,
            "photoUrl": None,
            "fcmToken": None,
            "createdAt": utc_now(),
            "needsPasswordReset": False,
        }
        store.data.setdefault("users", {})[uid] = profile
        return CurrentUser(
            uid=uid,
            email=email,
            role=role,
            display_name=profile["displayName"],
            profile=dict(profile),
        )

    return _make
