"""Stripping of HTML from user-supplied text before it is stored or pushed.

Titles, descriptions, post content, donation messages and event summaries
end up in push notifications and in the mobile app's rich text views, so no
markup is kept at all.
"""

from typing import Any

import nh3

_MAX_DEPTH = 20


class InputSanitizer:
    """nh3 with an empty allowlist: every tag is removed, its text is kept."""

    @staticmethod
    def sanitize_text(value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return value
        return nh3.clean(value, tags=set(), attributes={})

    @classmethod
    def sanitize_dict(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Copy of data with every nested string cleaned; other values untouched."""
        return cls._clean(data, _MAX_DEPTH)

    @classmethod
    def _clean(cls, value: Any, depth: int) -> Any:
        if isinstance(value, str):
            return cls.sanitize_text(value)
        if depth <= 0 and isinstance(value, (dict, list)):
            raise ValueError("Input nested too deeply")
        if isinstance(value, dict):
            return {k: cls._clean(v, depth - 1) for k, v in value.items()}
        if isinstance(value, list):
            return [cls._clean(v, depth - 1) for v in value]
        return value


def sanitize_text(value: str | None) -> str | None:
    return InputSanitizer.sanitize_text(value)
