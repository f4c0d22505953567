from __future__ import annotations

import pytest

from sam_gateway.domain.value_objects import (
    Language,
    ResolvedText,
    available_languages,
    has_language,
    localized_text,
    resolve_text,
)
from sam_gateway.domain.value_objects.language import is_supported_language


def test_requested_language_wins() -> None:
    resolved = resolve_text({"en": "Paracetamol", "fr": "Paracétamol"}, "fr")

    assert resolved == ResolvedText(text="Paracétamol", language="fr", is_fallback=False)


def test_falls_back_in_fixed_order() -> None:
    resolved = resolve_text({"de": "Paracetamol DE", "nl": "Paracetamol NL"}, "fr")

    assert resolved.text == "Paracetamol NL"
    assert resolved.language == "nl"
    assert resolved.is_fallback is True


def test_english_preferred_over_other_fallbacks() -> None:
    resolved = resolve_text({"de": "Natriumfluorid", "en": "Sodium fluoride"}, "nl")

    assert resolved.language == "en"


@pytest.mark.parametrize("text", [None, {}])
def test_empty_input_resolves_to_empty(text) -> None:
    assert resolve_text(text, "en") == ResolvedText(text="", language=None, is_fallback=False)


def test_unknown_keys_are_used_deterministically() -> None:
    resolved = resolve_text({"la": "Natrii fluoridum", "it": "Fluoruro di sodio"}, "en")

    assert resolved.language == "it"
    assert resolved.is_fallback is True


def test_blank_entries_are_skipped() -> None:
    resolved = resolve_text({"en": "", "nl": "Natriumfluoride"}, Language.EN)

    assert resolved.text == "Natriumfluoride"
    assert resolved.language == "nl"


def test_helpers() -> None:
    text = {"fr": "Bonjour", "en": "Hello"}

    assert localized_text(text, "de") == "Hello"
    assert available_languages(text) == ["en", "fr"]
    assert has_language(text, Language.FR)
    assert not has_language(text, "nl")
    assert resolve_text(text, "fr").to_dict() == {
        "text": "Bonjour",
        "actualLanguage": "fr",
        "isFallback": False,
    }


def test_language_parsing() -> None:
    assert Language.parse("nl-BE") is Language.NL
    assert Language.parse(" FR ") is Language.FR
    assert Language.parse("es") is None
    assert Language.parse(None) is None


def test_request_languages_are_strict() -> None:
    assert is_supported_language("de")
    assert not is_supported_language("DE")
    assert not is_supported_language("es")
    assert not is_supported_language(None)
