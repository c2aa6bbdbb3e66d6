"""HTTP tests for /api/auth and bearer-token resolution."""

from httpx import AsyncClient

from tests.fakes import auth


async def test_login_returns_token(client: AsyncClient, make_user) -> None:
    """POST /api/auth/login returns the ID token and profile."""
    user = make_user("media", email="media@example.com")
    response = await client.post(
        "/api/auth/login", json={"email": "media@example.com", "password": "secret123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token"] == f"token-{user.uid}"
    assert data["user"]["role"] == "media"


async def test_login_wrong_password_is_401(client: AsyncClient, make_user) -> None:
    make_user("media", email="media@example.com")
    response = await client.post(
        "/api/auth/login", json={"email": "media@example.com", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid password"


async def test_login_validation_error_is_400(client: AsyncClient) -> None:
    """Malformed bodies return 400 VALIDATION_ERROR naming the field."""
    response = await client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("email:")
    assert error["details"]["errors"]


async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "No token provided"


async def test_me_with_invalid_token(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid or expired token"


async def test_me_with_valid_token(client: AsyncClient, make_user) -> None:
    user = make_user("pasteur")
    response = await client.get("/api/auth/me", headers=auth(user))
    assert response.status_code == 200
    assert response.json()["user"]["uid"] == user.uid


async def test_token_without_profile_is_404(client: AsyncClient, identity) -> None:
    uid = identity.add_account("ghost@example.com")
    token = identity.issue_token(uid)
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


async def test_reset_password_flow(client: AsyncClient, store, identity, make_user) -> None:
    """Invitee checks the token, sets a password, then the token stops working."""
    admin = make_user("admin")
    invite = await client.post(
        "/api/admin/users/invite",
        json={"email": "new@example.com", "role": "pasteur", "displayName": "Pasteur Marc"},
        headers=auth(admin),
    )
    uid = invite.json()["userId"]
    token = store.data["users"][uid]["inviteToken"]

    check = await client.post("/api/auth/verify-token", json={"token": token})
    assert check.json()["valid"] is True

    reset = await client.post("/api/auth/reset-password", json={"token": token, "newPassword": "motdepasse"})
    assert reset.status_code == 200

    again = await client.post("/api/auth/reset-password", json={"token": token, "newPassword": "motdepasse"})
    assert again.status_code == 404
    assert again.json()["error"]["message"] == "Invalid or expired token"

    login = await client.post("/api/auth/login", json={"email": "new@example.com", "password": "motdepasse"})
    assert login.status_code == 200


async def test_fcm_token_registration(client: AsyncClient, store, push, make_user) -> None:
    user = make_user("user")
    response = await client.put("/api/auth/fcm-token", json={"fcmToken": "device-1"}, headers=auth(user))
    assert response.status_code == 200
    assert store.data["users"][user.uid]["fcmToken"] == "device-1"
    assert push.subscriptions == [(["device-1"], "all_users")]
