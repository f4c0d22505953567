"""
Domain Value Objects

Immutable value objects shared by the registry mapping and caching layers.
"""
from .cache_policy import CachePolicy, DataClass
from .language import (
    DEFAULT_LANGUAGE,
    LANGUAGE_FALLBACK_ORDER,
    SUPPORTED_LANGUAGE_CODES,
    Language,
    is_supported_language,
)
from .multilingual_text import (
    MultilingualText,
    ResolvedText,
    available_languages,
    has_language,
    localized_text,
    resolve_text,
)

__all__ = [
    'CachePolicy',
    'DataClass',
    'DEFAULT_LANGUAGE',
    'LANGUAGE_FALLBACK_ORDER',
    'SUPPORTED_LANGUAGE_CODES',
    'Language',
    'is_supported_language',
    'MultilingualText',
    'ResolvedText',
    'available_languages',
    'has_language',
    'localized_text',
    'resolve_text',
]
