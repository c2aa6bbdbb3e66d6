"""Tests for HTML stripping of user text."""

import pytest

from app.shared.utils.sanitization import InputSanitizer, sanitize_text


def test_sanitize_text_strips_markup_and_whitespace() -> None:
    assert sanitize_text("  <b>Culte</b> du soir ") == "Culte du soir"
    assert sanitize_text("<script>alert(1)</script>Bonjour") == "Bonjour"
    assert sanitize_text(None) is None
    assert sanitize_text("   ") == ""


def test_sanitize_dict_cleans_nested_strings_only() -> None:
    cleaned = InputSanitizer.sanitize_dict(
        {"summary": "<i>Ouverture</i>", "speakers": ["<b>Marc</b>"], "order": 1}
    )
    assert cleaned == {"summary": "Ouverture", "speakers": ["Marc"], "order": 1}


def test_sanitize_dict_rejects_deep_nesting() -> None:
    data: dict = {}
    node = data
    for _ in range(30):
        node["next"] = {}
        node = node["next"]
    with pytest.raises(ValueError):
        InputSanitizer.sanitize_dict(data)
