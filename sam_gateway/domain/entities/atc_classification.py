"""
ATC classification entity

Codes are hierarchical: the level is encoded by the code length
(A -> A01 -> A01A -> A01AA -> A01AA01).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sam_gateway.constants import (
    ATC_CODE_LENGTH_BY_LEVEL,
    ATC_LEVEL_BY_LENGTH,
    ATC_MIN_SUBSTANCE_LENGTH,
)
from sam_gateway.domain.value_objects.multilingual_text import MultilingualText


def classification_level(code: str) -> int:
    """
    Derive the classification level from the code length.

    Returns 0 for lengths that match no level; callers treat that as an
    unknown tier.

    Examples:
        >>> classification_level("A")
        1
        >>> classification_level("A01AA01")
        5
        >>> classification_level("A0")
        0
    """
    length = len(code or "")
    if length >= ATC_MIN_SUBSTANCE_LENGTH:
        return 5
    return ATC_LEVEL_BY_LENGTH.get(length, 0)


def parent_code(code: str) -> Optional[str]:
    """
    Truncate a code to the canonical length of the level above it.

    Examples:
        >>> parent_code("A01AA01")
        'A01AA'
        >>> parent_code("A01")
        'A'
        >>> parent_code("A") is None
        True
    """
    level = classification_level(code)
    if level <= 1:
        return None
    return code[:ATC_CODE_LENGTH_BY_LEVEL[level - 1]]


@dataclass(frozen=True)
class AtcClassification:
    """A single node of the classification tree."""

    code: str
    name: str
    level: int
    parent_code: Optional[str] = None
    name_language: Optional[str] = None
    name_is_fallback: bool = False
    title: Optional[MultilingualText] = None
    description: Optional[str] = None
    posology_note: Optional[MultilingualText] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "level": self.level,
            "parentCode": self.parent_code,
            "nameLanguage": self.name_language,
            "isFallback": self.name_is_fallback,
            "title": self.title,
            "description": self.description,
            "posologyNote": self.posology_note,
        }


@dataclass(frozen=True)
class AtcSearchResult:
    """Classifications matched by a search plus the direct children of a requested code."""

    classifications: Tuple[AtcClassification, ...] = field(default_factory=tuple)
    children: Tuple[AtcClassification, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classifications": [item.to_dict() for item in self.classifications],
            "children": [item.to_dict() for item in self.children],
        }
