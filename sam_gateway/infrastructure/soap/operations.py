"""
Registry of the SAM v2 query operations this gateway issues.

Each operation knows the element that wraps one record in its response and
the freshness class its data belongs to, so the builder, parser and cache
can be driven by the operation name alone.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from sam_gateway.domain.exceptions import InvalidParameterError
from sam_gateway.domain.value_objects.cache_policy import DataClass


@dataclass(frozen=True)
class SamOperation:
    name: str
    record_element: str
    data_class: DataClass
    # Records nest inside records of the same element (classification trees).
    nested_records: bool = False

    @property
    def request_element(self) -> str:
        return f"{self.name}Request"

    @property
    def response_element(self) -> str:
        return f"{self.name}Response"


FIND_AMP = SamOperation("FindAmp", "Amp", DataClass.VOLATILE_CLINICAL)
FIND_VMP_GROUP = SamOperation("FindVmpGroup", "VmpGroup", DataClass.CORE_REFERENCE_DATA)
FIND_REIMBURSEMENT = SamOperation("FindReimbursement", "ReimbursementContexts", DataClass.CORE_REFERENCE_DATA)
FIND_COMPANY = SamOperation("FindCompany", "Company", DataClass.CORE_REFERENCE_DATA)
FIND_COMMENTED_CLASSIFICATION = SamOperation(
    "FindCommentedClassification",
    "CommentedClassification",
    DataClass.STATIC_REFERENCE_DATA,
    nested_records=True,
)
FIND_STANDARD_DOSAGE = SamOperation("FindStandardDosage", "StandardDosage", DataClass.VOLATILE_CLINICAL)
FIND_CHAPTER_IV_PARAGRAPH = SamOperation("FindChapterIVParagraph", "Paragraph", DataClass.VOLATILE_CLINICAL)
FIND_VMP = SamOperation("FindVmp", "Vmp", DataClass.CORE_REFERENCE_DATA)
FIND_LEGISLATION_TEXT = SamOperation("FindLegislationText", "LegalBasis", DataClass.STATIC_REFERENCE_DATA)

OPERATIONS: Dict[str, SamOperation] = {
    operation.name: operation
    for operation in (
        FIND_AMP,
        FIND_VMP_GROUP,
        FIND_REIMBURSEMENT,
        FIND_COMPANY,
        FIND_COMMENTED_CLASSIFICATION,
        FIND_STANDARD_DOSAGE,
        FIND_CHAPTER_IV_PARAGRAPH,
        FIND_VMP,
        FIND_LEGISLATION_TEXT,
    )
}


def get_operation(name: str) -> SamOperation:
    """Look up an operation by its SOAP name; unknown names are a parameter error."""
    operation = OPERATIONS.get(name)
    if operation is None:
        raise InvalidParameterError("operation", f"Unsupported operation: {name}")
    return operation
