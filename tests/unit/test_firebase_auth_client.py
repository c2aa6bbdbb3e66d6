"""Tests for ID token verification in FirebaseAuthClient."""

import time
from datetime import timedelta

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from google.auth import crypt
from google.auth import jwt as google_jwt

from app.application.dtos.identity import IdentityErrorCode
from app.infrastructure.firebase.auth_client import FirebaseAuthClient
from app.infrastructure.firebase.client import FirebaseCredentials
from app.shared.utils.datetime import utc_now

PROJECT_ID = "voice-of-faith-test"


@pytest.fixture(scope="module")
def signing_key() -> tuple[str, str]:
    """Return (private key PEM, self-signed certificate PEM)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "securetoken")])
    now = utc_now()
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    return key_pem, cert.public_bytes(serialization.Encoding.PEM).decode()


def _id_token(key_pem: str, uid: str, issuer: str | None = None) -> str:
    now = int(time.time())
    payload = {
        "iss": issuer or f"https://securetoken.google.com/{PROJECT_ID}",
        "aud": PROJECT_ID,
        "sub": uid,
        "user_id": uid,
        "email": f"{uid}@example.com",
        "iat": now - 10,
        "exp": now + 3600,
    }
    signer = crypt.RSASigner.from_string(key_pem, key_id="kid-1")
    return google_jwt.encode(signer, payload).decode()


@pytest.fixture
def cert_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
async def auth_client(signing_key, cert_requests):
    _, cert_pem = signing_key

    def handler(request: httpx.Request) -> httpx.Response:
        cert_requests.append(request)
        return httpx.Response(
            200,
            json={"kid-1": cert_pem},
            headers={"Cache-Control": "public, max-age=600, must-revalidate"},
        )

    credentials = FirebaseCredentials(
        project_id=PROJECT_ID, client_email="sa@example.com", private_key="", token_source=None
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        yield FirebaseAuthClient(credentials, "web-api-key", http)


async def test_verify_reuses_cached_certs(auth_client, signing_key, cert_requests) -> None:
    """Certificates are fetched once and reused until their max-age lapses."""
    key_pem, _ = signing_key
    for uid in ("alice", "bob", "alice"):
        result = await auth_client.verify_id_token(_id_token(key_pem, uid))
        assert result.ok
        assert result.value.uid == uid
    assert len(cert_requests) == 1

    auth_client._public_keys._expires_at = 0.0
    assert (await auth_client.verify_id_token(_id_token(key_pem, "carol"))).ok
    assert len(cert_requests) == 2


async def test_verify_rejects_foreign_issuer(auth_client, signing_key) -> None:
    key_pem, _ = signing_key
    token = _id_token(key_pem, "mallory", issuer="https://securetoken.google.com/other-project")
    result = await auth_client.verify_id_token(token)
    assert not result.ok
    assert result.error == IdentityErrorCode.INVALID_TOKEN


async def test_verify_rejects_garbage(auth_client) -> None:
    result = await auth_client.verify_id_token("not-a-jwt")
    assert result.error == IdentityErrorCode.INVALID_TOKEN
