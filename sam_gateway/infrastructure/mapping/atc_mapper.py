"""Map commented classification records to ATC classifications."""
from __future__ import annotations

from typing import Any, Mapping, Union

from sam_gateway.domain.entities.atc_classification import (
    AtcClassification,
    classification_level,
    parent_code,
)
from sam_gateway.domain.value_objects.language import Language
from sam_gateway.domain.value_objects.multilingual_text import resolve_text

from .record_fields import attribute, field_text, multilingual, require

__all__ = ["classification_level", "parent_code", "transform_atc_classification"]


def transform_atc_classification(
    record: Mapping[str, Any],
    language: Union[Language, str],
) -> AtcClassification:
    """
    Build an AtcClassification from a raw record.

    The code comes from the ``Code`` attribute or, in older payloads, a
    ``CommentedClassificationCode`` element. The display name is the title
    resolved for ``language``, or the code when there is no title.

    Raises:
        IncompleteRecordError: If the record carries no code.
    """
    code = require(
        attribute(record, "Code") or field_text(record, "CommentedClassificationCode"),
        "AtcClassification",
        "code",
    )

    title = multilingual(record.get("Title"))
    resolved = resolve_text(title, language)
    description = resolve_text(multilingual(record.get("Content")), language).text or None

    return AtcClassification(
        code=code,
        name=resolved.text or code,
        level=classification_level(code),
        parent_code=parent_code(code),
        name_language=resolved.language,
        name_is_fallback=resolved.is_fallback,
        title=title,
        description=description,
        posology_note=multilingual(record.get("PosologyNote")),
    )
