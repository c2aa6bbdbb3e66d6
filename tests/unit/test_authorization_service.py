"""Tests for role gates and the owner-or-admin rule."""

import pytest

from app.application.dtos.user import CurrentUser
from app.application.services import AuthorizationService
from app.domain.exceptions import AuthorizationException


def _user(uid: str, role: str) -> CurrentUser:
    return CurrentUser(uid=uid, email=f"{uid}@example.com", role=role)


def test_admin_can_modify_anything() -> None:
    authz = AuthorizationService()
    admin = _user("admin", "admin")
    assert authz.can_modify("someone-else", admin)
    assert authz.can_modify(None, admin)


def test_owner_can_modify_own_resource() -> None:
    authz = AuthorizationService()
    assert authz.can_modify("p1", _user("p1", "pasteur"))
    assert not authz.can_modify("p2", _user("p1", "pasteur"))
    assert not authz.can_modify(None, _user("p1", "media"))


def test_require_owner_or_admin_raises_with_context() -> None:
    """Non-owner moderator gets 403 naming the resource and action."""
    authz = AuthorizationService()
    with pytest.raises(AuthorizationException) as exc_info:
        authz.require_owner_or_admin("owner", _user("other", "media"), "audio", "delete")
    assert exc_info.value.message == "You do not have permission to delete this audio"
    assert exc_info.value.details == {"resource": "audio", "action": "delete"}


@pytest.mark.parametrize(
    ("role", "is_admin", "is_moderator"),
    [
        ("admin", True, True),
        ("pasteur", False, True),
        ("media", False, True),
        ("user", False, False),
    ],
)
def test_role_gates(role: str, is_admin: bool, is_moderator: bool) -> None:
    authz = AuthorizationService()
    user = _user("u", role)
    assert authz.is_admin(user) is is_admin
    assert authz.is_moderator(user) is is_moderator
    assert user.is_moderator is is_moderator
    if not is_moderator:
        with pytest.raises(AuthorizationException):
            authz.require_moderator(user)
    if not is_admin:
        with pytest.raises(AuthorizationException):
            authz.require_admin(user)
