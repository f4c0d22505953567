"""
Chapter IV entities

Chapter IV paragraphs describe medicines that need prior authorisation from
the patient's insurer before they are reimbursed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sam_gateway.domain.value_objects.multilingual_text import MultilingualText


@dataclass(frozen=True)
class ChapterIVVerse:
    verse_seq: int
    verse_num: Optional[int] = None
    verse_seq_parent: int = 0
    verse_level: int = 1
    text: Optional[MultilingualText] = None
    request_type: Optional[str] = None  # N=new, P=prolongation, None=both
    agreement_term_quantity: Optional[int] = None
    agreement_term_unit: Optional[str] = None  # D, W, M or Y
    start_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verseSeq": self.verse_seq,
            "verseNum": self.verse_num,
            "verseSeqParent": self.verse_seq_parent,
            "verseLevel": self.verse_level,
            "text": self.text,
            "requestType": self.request_type,
            "agreementTermQuantity": self.agreement_term_quantity,
            "agreementTermUnit": self.agreement_term_unit,
            "startDate": self.start_date,
        }


@dataclass(frozen=True)
class ChapterIVParagraph:
    chapter_name: str
    paragraph_name: str
    legal_reference_path: Optional[str] = None
    key_string: Optional[MultilingualText] = None
    agreement_type: Optional[str] = None
    publication_date: Optional[str] = None
    modification_date: Optional[str] = None
    paragraph_version: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    verses: Tuple[ChapterIVVerse, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chapterName": self.chapter_name,
            "paragraphName": self.paragraph_name,
            "legalReferencePath": self.legal_reference_path,
            "keyString": self.key_string,
            "agreementType": self.agreement_type,
            "publicationDate": self.publication_date,
            "modificationDate": self.modification_date,
            "paragraphVersion": self.paragraph_version,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "verses": [verse.to_dict() for verse in self.verses],
        }
