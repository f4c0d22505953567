"""Map Chapter IV paragraph records."""
from __future__ import annotations

from typing import Any, Mapping

from sam_gateway.domain.entities.chapter_iv import ChapterIVParagraph, ChapterIVVerse

from .record_fields import as_list, as_mapping, attribute, field_text, multilingual, require, to_int


def _transform_verse(raw: Mapping[str, Any]) -> ChapterIVVerse:
    agreement_term = as_mapping(raw.get("AgreementTerm"))
    return ChapterIVVerse(
        verse_seq=to_int(raw.get("@VerseSeq")) or 0,
        verse_num=to_int(raw.get("VerseNum")),
        verse_seq_parent=to_int(raw.get("VerseSeqParent")) or 0,
        verse_level=to_int(raw.get("VerseLevel")) or 1,
        text=multilingual(raw.get("Text")),
        request_type=field_text(raw, "RequestType"),
        agreement_term_quantity=to_int(agreement_term.get("Quantity")) if agreement_term else None,
        agreement_term_unit=field_text(agreement_term, "Unit") if agreement_term else None,
        start_date=attribute(raw, "StartDate"),
    )


def transform_chapter_iv_paragraph(record: Mapping[str, Any]) -> ChapterIVParagraph:
    chapter_name = require(attribute(record, "ChapterName"), "ChapterIVParagraph", "chapter_name")
    paragraph_name = require(attribute(record, "ParagraphName"), "ChapterIVParagraph", "paragraph_name")

    verses = sorted(
        (_transform_verse(raw) for raw in as_list(record.get("Verse")) if isinstance(raw, Mapping)),
        key=lambda verse: verse.verse_seq,
    )

    return ChapterIVParagraph(
        chapter_name=chapter_name,
        paragraph_name=paragraph_name,
        legal_reference_path=field_text(record, "LegalReferencePath"),
        key_string=multilingual(record.get("KeyString")),
        agreement_type=field_text(record, "AgreementType"),
        publication_date=field_text(record, "PublicationDate"),
        modification_date=field_text(record, "ModificationDate"),
        paragraph_version=to_int(record.get("ParagraphVersion")),
        start_date=attribute(record, "StartDate"),
        end_date=attribute(record, "EndDate"),
        verses=tuple(verses),
    )
