"""Domain enumerations for the Voice Of Faith application.

Enums represent fixed sets of domain values (roles, content categories,
donation kinds). Values are the strings persisted in the document store.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Role(_ValuesMixin, str, Enum):
    """User role stored on the profile document.

    Moderators (admin, pasteur, media) may publish content; only admin
    manages users, live status, donations and statistics.
    """

    USER = "user"
    PASTEUR = "pasteur"
    MEDIA = "media"
    ADMIN = "admin"


MODERATOR_ROLES: frozenset[str] = frozenset(
    {Role.ADMIN.value, Role.PASTEUR.value, Role.MEDIA.value}
)
INVITABLE_ROLES: frozenset[str] = frozenset({Role.PASTEUR.value, Role.MEDIA.value})


class AudioCategory(_ValuesMixin, str, Enum):
    """Category of an audio item."""

    EMISSION = "emission"
    PODCAST = "podcast"
    TEACHING = "teaching"


class PostType(_ValuesMixin, str, Enum):
    """Media kind attached to a post."""

    IMAGE = "image"
    VIDEO = "video"


class PostCategory(_ValuesMixin, str, Enum):
    """Editorial category of a post (drives the notification title)."""

    PENSEE = "pensee"
    PASTEUR = "pasteur"
    MEDIA = "media"


class DonationType(_ValuesMixin, str, Enum):
    ONE_TIME = "oneTime"
    MONTHLY = "monthly"


class PaymentMethod(_ValuesMixin, str, Enum):
    CREDIT_CARD = "creditCard"
    PAYPAL = "paypal"
    TMONEY = "tmoney"
    FLOOZ = "flooz"
