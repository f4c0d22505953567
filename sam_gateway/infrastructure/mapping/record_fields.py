"""Helpers for reading values out of raw registry records.

Raw values are plain strings for attribute-less leaf elements, mappings for
elements with attributes or children and lists for repeated elements. The
helpers here never raise on malformed content; they degrade to ``None``.
"""
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sam_gateway.domain.exceptions import IncompleteRecordError
from sam_gateway.domain.value_objects.language import DEFAULT_LANGUAGE, Language
from sam_gateway.domain.value_objects.multilingual_text import MultilingualText

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first(value: Any) -> Any:
    items = as_list(value)
    return items[0] if items else None


def as_mapping(value: Any) -> Mapping[str, Any]:
    value = first(value)
    return value if isinstance(value, Mapping) else {}


def text_value(value: Any) -> Optional[str]:
    """Scalar text of a raw value, stripped; ``None`` when absent or blank."""
    value = first(value)
    if isinstance(value, Mapping):
        value = value.get("#text")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def attribute(record: Mapping[str, Any], name: str) -> Optional[str]:
    return text_value(record.get(f"@{name}"))


def field_text(record: Mapping[str, Any], name: str) -> Optional[str]:
    return text_value(record.get(name))


def require(value: Optional[str], entity_type: str, field_name: str) -> str:
    if not value:
        raise IncompleteRecordError(entity_type, field_name)
    return value


def to_float(value: Any) -> Optional[float]:
    text = text_value(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_int(value: Any) -> Optional[int]:
    number = to_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def to_bool(value: Any) -> Optional[bool]:
    text = text_value(value)
    if text is None:
        return None
    lowered = text.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _language_of(raw: Mapping[str, Any]) -> Optional[Language]:
    raw_language = raw.get("@lang")
    if raw_language is None:
        return DEFAULT_LANGUAGE
    return Language.parse(raw_language)


def _collect(value: Any, into: Dict[str, str]) -> None:
    for item in as_list(value):
        if isinstance(item, Mapping):
            if "Text" in item:
                _collect(item["Text"], into)
                continue
            language = _language_of(item)
            text = text_value(item)
            if language is None or text is None:
                continue
            into.setdefault(language.value, text)
            continue
        text = text_value(item)
        if text is not None:
            into.setdefault(DEFAULT_LANGUAGE.value, text)


def multilingual(value: Any) -> Optional[MultilingualText]:
    """
    Fold raw localized text into a MultilingualText.

    Accepts a list of ``{"@lang", "#text"}`` elements, a ``{"Text": [...]}``
    wrapper or a bare string. Text without a language is attributed to
    English; unknown languages are dropped.

    Examples:
        >>> multilingual([{"@lang": "fr", "#text": "Paracétamol"}, {"#text": "Paracetamol"}])
        {'fr': 'Paracétamol', 'en': 'Paracetamol'}
        >>> multilingual({"Text": []}) is None
        True
    """
    collected: Dict[str, str] = {}
    _collect(value, collected)
    return collected or None


def keyed_multilingual(pairs: Iterable[tuple], prefix: str) -> Optional[MultilingualText]:
    """Collect ``<prefix><lang>`` keyed values into a MultilingualText."""
    collected: Dict[str, str] = {}
    for key, value in pairs:
        if not key or not key.startswith(prefix) or not value:
            continue
        language = Language.parse(key[len(prefix):])
        if language is not None:
            collected.setdefault(language.value, value)
    return collected or None
