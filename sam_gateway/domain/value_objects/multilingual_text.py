"""
Multilingual text resolution

A MultilingualText maps language codes to display strings. Only languages
with actual content are present; absence of any text is ``None``, never an
empty mapping.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Union

from .language import LANGUAGE_FALLBACK_ORDER, Language

MultilingualText = Dict[str, str]


@dataclass(frozen=True)
class ResolvedText:
    """Outcome of resolving a MultilingualText for one requested language."""

    text: str
    language: Optional[str]
    is_fallback: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "text": self.text,
            "actualLanguage": self.language,
            "isFallback": self.is_fallback,
        }


_EMPTY = ResolvedText(text="", language=None, is_fallback=False)


def resolve_text(
    text: Optional[Mapping[str, str]],
    requested_language: Union[Language, str],
) -> ResolvedText:
    """
    Pick the display string for ``requested_language``.

    Order: requested language, then en -> nl -> fr -> de, then any other key
    in sorted order. Never raises.

    Examples:
        >>> resolve_text({"en": "Sodium fluoride"}, "de")
        ResolvedText(text='Sodium fluoride', language='en', is_fallback=True)
        >>> resolve_text(None, "en")
        ResolvedText(text='', language=None, is_fallback=False)
    """
    if not text:
        return _EMPTY

    requested = requested_language.value if isinstance(requested_language, Language) else str(requested_language)

    value = text.get(requested)
    if value:
        return ResolvedText(text=value, language=requested, is_fallback=False)

    for fallback in LANGUAGE_FALLBACK_ORDER:
        if fallback.value == requested:
            continue
        value = text.get(fallback.value)
        if value:
            return ResolvedText(text=value, language=fallback.value, is_fallback=True)

    for language in sorted(text):
        value = text[language]
        if value:
            return ResolvedText(text=value, language=language, is_fallback=language != requested)

    return _EMPTY


def localized_text(text: Optional[Mapping[str, str]], requested_language: Union[Language, str]) -> str:
    """Shortcut returning only the display string."""
    return resolve_text(text, requested_language).text


def available_languages(text: Optional[Mapping[str, str]]) -> List[str]:
    if not text:
        return []
    return [language.value for language in LANGUAGE_FALLBACK_ORDER if text.get(language.value)]


def has_language(text: Optional[Mapping[str, str]], language: Union[Language, str]) -> bool:
    code = language.value if isinstance(language, Language) else language
    return bool(text and text.get(code))
