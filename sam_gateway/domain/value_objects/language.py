"""
Language value object

The registry publishes its texts in the four Belgian working languages.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple


class Language(str, Enum):
    """Supported content languages."""
    EN = "en"
    NL = "nl"
    FR = "fr"
    DE = "de"

    @classmethod
    def parse(cls, value: Any) -> Optional[Language]:
        """
        Coerce a raw language code into a Language.

        Codes are matched exactly after trimming; regional variants such as
        ``nl-BE`` are reduced to their primary subtag.

        Examples:
            >>> Language.parse("fr")
            <Language.FR: 'fr'>
            >>> Language.parse("nl-BE")
            <Language.NL: 'nl'>
            >>> Language.parse("la") is None
            True
        """
        if isinstance(value, Language):
            return value
        if not isinstance(value, str):
            return None
        code = value.strip().split("-")[0].lower()
        try:
            return cls(code)
        except ValueError:
            return None


LANGUAGE_FALLBACK_ORDER: Tuple[Language, ...] = (Language.EN, Language.NL, Language.FR, Language.DE)
SUPPORTED_LANGUAGE_CODES = frozenset(language.value for language in Language)
DEFAULT_LANGUAGE = Language.EN


def is_supported_language(value: Any) -> bool:
    """Strict check used for request parameters: exact lowercase code only."""
    return isinstance(value, str) and value in SUPPORTED_LANGUAGE_CODES
