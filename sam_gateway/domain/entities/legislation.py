"""
Legislation entities

Reimbursement rules rest on Royal Decrees (legal bases) split into chapters
and paragraphs (legal references) that hold the actual legal texts. Legal
texts are published in French, Dutch and German only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from sam_gateway.domain.value_objects.language import Language
from sam_gateway.domain.value_objects.multilingual_text import MultilingualText

# Official languages of Belgian legislation, most complete first.
LEGAL_LANGUAGE_ORDER = ("fr", "nl", "de")


def legal_text(texts: Optional[MultilingualText], language: Union[Language, str]) -> str:
    """Pick the requested language, then the official languages, then anything."""
    if not texts:
        return ""
    requested = language.value if isinstance(language, Language) else language
    for code in (requested, *LEGAL_LANGUAGE_ORDER):
        if texts.get(code):
            return texts[code]
    return next((text for text in texts.values() if text), "")


@dataclass(frozen=True)
class LegalText:
    key: str
    content: Optional[MultilingualText] = None
    type: str = "ALINEA"
    sequence_nr: int = 0
    last_modified_on: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    children: Tuple["LegalText", ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "content": self.content,
            "type": self.type,
            "sequenceNr": self.sequence_nr,
            "lastModifiedOn": self.last_modified_on,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class LegalReference:
    """A chapter or paragraph; holds either nested references or legal texts."""

    key: str
    title: Optional[MultilingualText] = None
    type: str = "CHAPTER"
    first_published_on: Optional[str] = None
    last_modified_on: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    legal_references: Tuple["LegalReference", ...] = field(default_factory=tuple)
    legal_texts: Tuple[LegalText, ...] = field(default_factory=tuple)

    def flatten_texts(self) -> List[LegalText]:
        """Every legal text below this reference in document order."""
        flattened: List[LegalText] = []
        pending = list(self.legal_texts)
        while pending:
            text = pending.pop(0)
            flattened.append(text)
            pending[:0] = text.children
        for reference in self.legal_references:
            flattened.extend(reference.flatten_texts())
        return flattened

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "type": self.type,
            "firstPublishedOn": self.first_published_on,
            "lastModifiedOn": self.last_modified_on,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "legalReferences": [reference.to_dict() for reference in self.legal_references],
            "legalTexts": [text.to_dict() for text in self.legal_texts],
        }


@dataclass(frozen=True)
class LegalBasis:
    key: str
    title: Optional[MultilingualText] = None
    type: str = "ROYAL_DECREE"
    effective_on: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    legal_references: Tuple[LegalReference, ...] = field(default_factory=tuple)

    def display_title(self, language: Union[Language, str]) -> str:
        """
        Localized title, or one derived from a ``RD<yyyymmdd>`` key.

        Examples:
            >>> LegalBasis(key="RD20180201").display_title("en")
            'Royal Decree 01.02.2018'
        """
        title = legal_text(self.title, language)
        if title:
            return title
        date = self.key[2:]
        if self.key.startswith("RD") and len(date) == 8 and date.isdigit():
            return f"Royal Decree {date[6:8]}.{date[4:6]}.{date[0:4]}"
        return self.key

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "type": self.type,
            "effectiveOn": self.effective_on,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "legalReferences": [reference.to_dict() for reference in self.legal_references],
        }
