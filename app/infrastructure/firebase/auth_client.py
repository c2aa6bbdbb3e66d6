"""Firebase Authentication adapter over the Identity Toolkit REST API.

Admin operations (create/lookup/update/delete accounts) use the service
account bearer token; end-user operations (password sign-in, token refresh)
use the Web API key. ID tokens are verified with google-auth against
Google's public certs, cached for the max-age Google advertises. Every
method returns an IdentityResult and never raises for provider-side failures.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any

import httpx
from google.auth import exceptions as google_auth_exceptions
from google.auth import jwt as google_jwt

from app.application.dtos.identity import (
    IdentityErrorCode,
    IdentityResult,
    IdentityUser,
    SignInTokens,
    TokenClaims,
)
from app.infrastructure.firebase.client import FirebaseCredentials
from app.infrastructure.security.jwt import create_custom_token

logger = logging.getLogger(__name__)

_IDENTITY_BASE = "https://identitytoolkit.googleapis.com/v1"
_SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"
_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)
_ISSUER_PREFIX = "https://securetoken.google.com/"
_MAX_AGE = re.compile(r"max-age=(\d+)")
_DEFAULT_CERT_TTL = 3600

_ERROR_MAP: dict[str, IdentityErrorCode] = {
    "EMAIL_EXISTS": IdentityErrorCode.EMAIL_EXISTS,
    "DUPLICATE_EMAIL": IdentityErrorCode.EMAIL_EXISTS,
    "EMAIL_NOT_FOUND": IdentityErrorCode.EMAIL_NOT_FOUND,
    "INVALID_PASSWORD": IdentityErrorCode.INVALID_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": IdentityErrorCode.INVALID_CREDENTIALS,
    "USER_DISABLED": IdentityErrorCode.USER_DISABLED,
    "USER_NOT_FOUND": IdentityErrorCode.USER_NOT_FOUND,
    "INVALID_ID_TOKEN": IdentityErrorCode.INVALID_TOKEN,
    "TOKEN_EXPIRED": IdentityErrorCode.INVALID_TOKEN,
    "INVALID_REFRESH_TOKEN": IdentityErrorCode.INVALID_TOKEN,
    "INVALID_GRANT_TYPE": IdentityErrorCode.INVALID_TOKEN,
    "WEAK_PASSWORD": IdentityErrorCode.WEAK_PASSWORD,
}


def _provider_error(resp: httpx.Response) -> IdentityResult[Any]:
    """Translate an Identity Toolkit error body into a failed result."""
    try:
        raw = (resp.json().get("error") or {}).get("message", "")
    except ValueError:
        raw = resp.text
    # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    code = raw.split(":", 1)[0].strip()
    error = _ERROR_MAP.get(code, IdentityErrorCode.UNKNOWN)
    return IdentityResult.failure(error, raw or f"HTTP {resp.status_code}")


class _PublicKeyCache:
    """Google's securetoken signing certs, refetched once Cache-Control max-age lapses."""

    def __init__(self, http_client: httpx.AsyncClient, url: str = _CERTS_URL) -> None:
        self._http = http_client
        self._url = url
        self._certs: dict[str, str] = {}
        self._expires_at = 0.0
        self._lock = asyncio.Lock()

    async def get(self) -> dict[str, str]:
        async with self._lock:
            if self._certs and time.monotonic() < self._expires_at:
                return self._certs
            resp = await self._http.get(self._url)
            resp.raise_for_status()
            self._certs = resp.json()
            match = _MAX_AGE.search(resp.headers.get("cache-control", ""))
            max_age = int(match.group(1)) if match else _DEFAULT_CERT_TTL
            self._expires_at = time.monotonic() + max_age
            return self._certs


def _decode_firebase_token(token: str, certs: dict[str, str], project_id: str) -> dict[str, Any]:
    claims = google_jwt.decode(token, certs=certs, audience=project_id)
    if claims.get("iss") != f"{_ISSUER_PREFIX}{project_id}":
        raise ValueError("Token was not issued by this Firebase project")
    return claims


class FirebaseAuthClient:
    """Identity provider backed by Firebase Authentication."""

    def __init__(
        self,
        credentials: FirebaseCredentials,
        api_key: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._credentials = credentials
        self._api_key = api_key
        self._http = http_client
        self._admin_base = f"{_IDENTITY_BASE}/projects/{credentials.project_id}"
        self._public_keys = _PublicKeyCache(http_client)

    async def _admin_post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        token = await self._credentials.token_source.token()
        return await self._http.post(
            f"{self._admin_base}/{path}",
            json=body,
            headers={"Authorization": f"Bearer {token}"},
        )

    async def get_user_by_email(self, email: str) -> IdentityResult[IdentityUser]:
        try:
            resp = await self._admin_post("accounts:lookup", {"email": [email]})
        except httpx.HTTPError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        if resp.status_code != 200:
            return _provider_error(resp)
        users = resp.json().get("users") or []
        if not users:
            return IdentityResult.failure(IdentityErrorCode.USER_NOT_FOUND, "User not found")
        u = users[0]
        return IdentityResult.success(
            IdentityUser(
                uid=u["localId"],
                email=u.get("email", email),
                display_name=u.get("displayName"),
                disabled=bool(u.get("disabled", False)),
            )
        )

    async def create_user(
        self, email: str, password: str, display_name: str | None = None
    ) -> IdentityResult[IdentityUser]:
        body: dict[str, Any] = {"email": email, "password": password, "emailVerified": False}
        if display_name:
            body["displayName"] = display_name
        try:
            resp = await self._admin_post("accounts", body)
        except httpx.HTTPError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        if resp.status_code != 200:
            return _provider_error(resp)
        return IdentityResult.success(
            IdentityUser(uid=resp.json()["localId"], email=email, display_name=display_name)
        )

    async def update_password(self, uid: str, password: str) -> IdentityResult[None]:
        try:
            resp = await self._admin_post("accounts:update", {"localId": uid, "password": password})
        except httpx.HTTPError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        if resp.status_code != 200:
            return _provider_error(resp)
        return IdentityResult.success()

    async def delete_user(self, uid: str) -> IdentityResult[None]:
        try:
            resp = await self._admin_post("accounts:delete", {"localId": uid})
        except httpx.HTTPError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        if resp.status_code != 200:
            return _provider_error(resp)
        return IdentityResult.success()

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> IdentityResult[SignInTokens]:
        try:
            resp = await self._http.post(
                f"{_IDENTITY_BASE}/accounts:signInWithPassword",
                params={"key": self._api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        if resp.status_code != 200:
            return _provider_error(resp)
        data = resp.json()
        return IdentityResult.success(
            SignInTokens(
                id_token=data["idToken"],
                refresh_token=data["refreshToken"],
                expires_in=int(data.get("expiresIn", 3600)),
                uid=data["localId"],
            )
        )

    async def refresh_token(self, refresh_token: str) -> IdentityResult[SignInTokens]:
        try:
            resp = await self._http.post(
                _SECURE_TOKEN_URL,
                params={"key": self._api_key},
                data={"grant_type": "refresh_token", "refresh_token": refresh_token},
            )
        except httpx.HTTPError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        if resp.status_code != 200:
            return _provider_error(resp)
        data = resp.json()
        return IdentityResult.success(
            SignInTokens(
                id_token=data["id_token"],
                refresh_token=data["refresh_token"],
                expires_in=int(data.get("expires_in", 3600)),
                uid=data.get("user_id", ""),
            )
        )

    async def verify_id_token(self, token: str) -> IdentityResult[TokenClaims]:
        try:
            certs = await self._public_keys.get()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Could not load Firebase signing certificates: %s", e)
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, "Token verification unavailable")
        try:
            claims = _decode_firebase_token(token, certs, self._credentials.project_id)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            logger.debug("ID token verification failed: %s", e)
            return IdentityResult.failure(IdentityErrorCode.INVALID_TOKEN, "Invalid token")
        uid = claims.get("user_id") or claims.get("sub")
        if not uid:
            return IdentityResult.failure(IdentityErrorCode.INVALID_TOKEN, "Invalid token")
        return IdentityResult.success(TokenClaims(uid=uid, email=claims.get("email"), raw=claims))

    async def create_custom_token(self, uid: str) -> IdentityResult[str]:
        try:
            token = create_custom_token(
                uid, self._credentials.client_email, self._credentials.private_key
            )
        except ValueError as e:
            return IdentityResult.failure(IdentityErrorCode.UNKNOWN, str(e))
        return IdentityResult.success(token)
