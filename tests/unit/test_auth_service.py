"""Tests for AuthService: login, refresh, custom tokens and invite redemption."""

from datetime import timedelta

import pytest

from app.application.services import AuthService
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.utils.datetime import utc_now


@pytest.fixture
def auth_service(settings, store, identity, mailer) -> AuthService:
    return AuthService(store, settings, identity=identity, mailer=mailer)


def _invited(store, uid: str, token: str, **extra) -> None:
    store.data.setdefault("users", {})[uid] = {
        "email": f"{uid}@example.com",
        "displayName": "Invited",
        "role": "media",
        "needsPasswordReset": True,
        "inviteToken": token,
        "invitedAt": utc_now(),
        **extra,
    }


async def test_login_returns_tokens_and_profile(auth_service, store, make_user) -> None:
    user = make_user("pasteur", email="p@example.com")
    result = await auth_service.login("P@example.com", "secret123")

    assert result["token"] == f"token-{user.uid}"
    assert result["refreshToken"] == f"refresh-{user.uid}"
    assert result["user"]["role"] == "pasteur"
    assert result["user"]["needsPasswordReset"] is False
    assert "lastLogin" in store.data["users"][user.uid]


async def test_login_error_messages(auth_service, identity, make_user) -> None:
    make_user("media", email="m@example.com")
    with pytest.raises(AuthenticationException) as exc_info:
        await auth_service.login("m@example.com", "wrong")
    assert exc_info.value.message == "Invalid password"

    with pytest.raises(AuthenticationException) as exc_info:
        await auth_service.login("nobody@example.com", "secret123")
    assert exc_info.value.message == "Email not found"


async def test_login_without_profile(auth_service, identity) -> None:
    identity.add_account("orphan@example.com")
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await auth_service.login("orphan@example.com", "secret123")
    assert exc_info.value.message == "User profile not found"


async def test_refresh(auth_service) -> None:
    with pytest.raises(ValidationException):
        await auth_service.refresh("")
    with pytest.raises(AuthenticationException):
        await auth_service.refresh("garbage")
    assert (await auth_service.refresh("refresh-u1"))["token"] == "token-u1"


async def test_custom_token_owner_or_admin(auth_service, make_user) -> None:
    """Non-admins may only mint a token for themselves."""
    admin = make_user("admin")
    media = make_user("media")
    assert (await auth_service.generate_custom_token(media.uid, user=media))["customToken"] == f"custom-{media.uid}"
    assert (await auth_service.generate_custom_token(media.uid, user=admin))["success"] is True
    with pytest.raises(AuthorizationException):
        await auth_service.generate_custom_token(admin.uid, user=media)


async def test_reset_password_activates_account(auth_service, store, identity, mailer) -> None:
    uid = identity.add_account("inv@example.com")
    _invited(store, uid, "tok-1", email="inv@example.com")

    result = await auth_service.reset_password("tok-1", "newpass1")

    assert result["message"] == "Password reset successfully"
    assert identity.passwords[uid] == "newpass1"
    profile = store.data["users"][uid]
    assert profile["needsPasswordReset"] is False
    assert profile["inviteToken"] is None
    assert mailer.welcomes == ["inv@example.com"]


async def test_reset_password_unknown_token(auth_service, store) -> None:
    _invited(store, "u1", "real-token")
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await auth_service.reset_password("other-token", "newpass1")
    assert exc_info.value.message == "Invalid or expired token"


async def test_reset_password_token_already_used(auth_service, store) -> None:
    """A token on a profile that no longer needs a reset does not match."""
    _invited(store, "u1", "tok-used", needsPasswordReset=False)
    with pytest.raises(ResourceNotFoundException):
        await auth_service.reset_password("tok-used", "newpass1")


async def test_reset_password_short_password(auth_service) -> None:
    with pytest.raises(ValidationException):
        await auth_service.reset_password("tok", "12345")


async def test_reset_password_token_ttl(settings, store, identity, mailer) -> None:
    """With a TTL configured, stale invitation tokens are rejected."""
    service = AuthService(
        store,
        settings.model_copy(update={"invite_token_ttl_days": 7}),
        identity=identity,
        mailer=mailer,
    )
    uid = identity.add_account("old@example.com")
    _invited(store, uid, "stale", invitedAt=utc_now() - timedelta(days=8))
    with pytest.raises(ResourceNotFoundException):
        await service.reset_password("stale", "newpass1")

    store.data["users"][uid]["inviteResendAt"] = utc_now()
    assert (await service.reset_password("stale", "newpass1"))["success"] is True


async def test_reset_password_welcome_failure_is_ignored(auth_service, store, identity, mailer) -> None:
    uid = identity.add_account("w@example.com")
    _invited(store, uid, "tok-w", email="w@example.com")
    mailer.fail_welcome = True
    assert (await auth_service.reset_password("tok-w", "newpass1"))["success"] is True


async def test_verify_token(auth_service, store) -> None:
    _invited(store, "u9", "tok-9")
    ok = await auth_service.verify_token("tok-9")
    assert ok["valid"] is True
    assert ok["user"]["uid"] == "u9"
    assert (await auth_service.verify_token("nope")) == {"valid": False, "error": "Invalid token"}
    assert (await auth_service.verify_token(""))["valid"] is False


async def test_verify_token_rejects_used_token(auth_service, store) -> None:
    _invited(store, "u10", "tok-10", needsPasswordReset=False)
    assert (await auth_service.verify_token("tok-10"))["valid"] is False


async def test_verify_token_agrees_with_reset_on_expiry(settings, store, identity, mailer) -> None:
    """A token reset_password would refuse as expired is reported invalid."""
    service = AuthService(
        store,
        settings.model_copy(update={"invite_token_ttl_days": 7}),
        identity=identity,
        mailer=mailer,
    )
    uid = identity.add_account("late@example.com")
    _invited(store, uid, "stale", invitedAt=utc_now() - timedelta(days=8))

    assert (await service.verify_token("stale")) == {"valid": False, "error": "Invalid token"}
    with pytest.raises(ResourceNotFoundException):
        await service.reset_password("stale", "newpass1")


@pytest.mark.parametrize(
    ("invited_at", "valid"),
    [
        ((utc_now() - timedelta(days=1)).isoformat(), True),
        ((utc_now() - timedelta(days=30)).isoformat(), False),
        ("not a date", False),
    ],
)
async def test_invite_expiry_reads_string_dates(settings, store, identity, mailer, invited_at, valid) -> None:
    """Profiles written with ISO-string invitation dates still honour the TTL."""
    service = AuthService(
        store,
        settings.model_copy(update={"invite_token_ttl_days": 7}),
        identity=identity,
        mailer=mailer,
    )
    _invited(store, "legacy", "tok-legacy", invitedAt=invited_at)
    assert (await service.verify_token("tok-legacy"))["valid"] is valid


async def test_logout_clears_device_token(auth_service, store, make_user) -> None:
    user = make_user("user")
    store.data["users"][user.uid]["fcmToken"] = "device"
    await auth_service.logout(user)
    assert store.data["users"][user.uid]["fcmToken"] is None
