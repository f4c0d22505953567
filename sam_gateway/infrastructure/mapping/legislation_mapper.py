"""Map FindLegislationText records into legal basis trees."""
from __future__ import annotations

from typing import Any, List, Mapping

from sam_gateway.domain.entities.legislation import LegalBasis, LegalReference, LegalText

from .record_fields import as_list, as_mapping, attribute, field_text, multilingual, require, to_int


def _children(raw: Mapping[str, Any], element: str) -> List[Mapping[str, Any]]:
    return [item for item in as_list(raw.get(element)) if isinstance(item, Mapping)]


def _transform_legal_text(raw: Mapping[str, Any]) -> LegalText:
    children = sorted(
        (_transform_legal_text(child) for child in _children(raw, "LegalText")),
        key=lambda text: text.sequence_nr,
    )
    return LegalText(
        key=attribute(raw, "Key") or "",
        content=multilingual(as_mapping(raw.get("Content")).get("Text")),
        type=field_text(raw, "Type") or "ALINEA",
        sequence_nr=to_int(raw.get("SequenceNr")) or 0,
        last_modified_on=field_text(raw, "LastModifiedOn"),
        start_date=attribute(raw, "StartDate"),
        end_date=attribute(raw, "EndDate"),
        children=tuple(children),
    )


def _transform_legal_reference(raw: Mapping[str, Any]) -> LegalReference:
    legal_texts = sorted(
        (_transform_legal_text(child) for child in _children(raw, "LegalText")),
        key=lambda text: text.sequence_nr,
    )
    return LegalReference(
        key=attribute(raw, "Key") or "",
        title=multilingual(raw.get("Title")),
        type=field_text(raw, "Type") or "CHAPTER",
        first_published_on=field_text(raw, "FirstPublishedOn"),
        last_modified_on=field_text(raw, "LastModifiedOn"),
        start_date=attribute(raw, "StartDate"),
        end_date=attribute(raw, "EndDate"),
        legal_references=tuple(_transform_legal_reference(child) for child in _children(raw, "LegalReference")),
        legal_texts=tuple(legal_texts),
    )


def transform_legal_basis(record: Mapping[str, Any]) -> LegalBasis:
    """
    Build a legal basis with its nested references and texts.

    Legal texts are ordered by sequence number at every level; references
    keep the registry's order.
    """
    key = require(attribute(record, "Key"), "LegalBasis", "key")
    return LegalBasis(
        key=key,
        title=multilingual(record.get("Title")),
        type=field_text(record, "Type") or "ROYAL_DECREE",
        effective_on=field_text(record, "EffectiveOn"),
        start_date=attribute(record, "StartDate"),
        end_date=attribute(record, "EndDate"),
        legal_references=tuple(
            _transform_legal_reference(child) for child in _children(record, "LegalReference")
        ),
    )
