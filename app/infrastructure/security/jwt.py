"""Firebase custom-token minting.

Custom tokens are RS256 JWTs signed with the service account private key;
clients exchange them for ID tokens with signInWithCustomToken.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.shared.utils.datetime import utc_now

CUSTOM_TOKEN_AUDIENCE = (
    "https://identitytoolkit.googleapis.com/google.identity.identitytoolkit.v1.IdentityToolkit"
)
CUSTOM_TOKEN_TTL = timedelta(hours=1)


def create_custom_token(
    uid: str,
    client_email: str,
    private_key: str,
    claims: dict[str, Any] | None = None,
) -> str:
    """Create a Firebase custom token for the given uid.

    Args:
        uid: Firebase user id the token authenticates as.
        client_email: Service account email (issuer and subject).
        private_key: Service account PEM private key.
        claims: Optional developer claims copied into the token.

    Returns:
        Encoded JWT string.

    Raises:
        ValueError: If uid is empty or the key cannot sign.
    """
    if not uid:
        raise ValueError("uid is required")
    now = utc_now()
    payload: dict[str, Any] = {
        "iss": client_email,
        "sub": client_email,
        "aud": CUSTOM_TOKEN_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int((now + CUSTOM_TOKEN_TTL).timestamp()),
        "uid": uid,
    }
    if claims:
        payload["claims"] = claims
    try:
        encoded = jwt.encode(payload, private_key, algorithm="RS256")
    except JWTError as e:
        raise ValueError(f"Unable to sign custom token: {e!s}") from e
    return cast(str, encoded)
