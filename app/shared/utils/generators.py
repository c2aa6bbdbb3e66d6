"""ID and value generators (CUIDs, opaque tokens, temporary passwords)."""

import secrets
import string

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_token() -> str:
    """Generate an opaque URL-safe token (invitation / reset links)."""
    return secrets.token_urlsafe(32)


def generate_random_password(length: int = 12) -> str:
    """Generate a random alphanumeric temporary password.

    Args:
        length: Number of characters (default 12).

    Returns:
        Password string.
    """
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))
