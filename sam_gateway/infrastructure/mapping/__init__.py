"""Mapping infrastructure exports."""

from .atc_mapper import classification_level, parent_code, transform_atc_classification
from .chapter_iv_mapper import transform_chapter_iv_paragraph
from .company_mapper import transform_company
from .dosage_mapper import transform_standard_dosage
from .legislation_mapper import transform_legal_basis
from .medication_mapper import (
    transform_generic_product,
    transform_ingredient,
    transform_medication,
    transform_medication_summary,
    transform_vmp_group,
)
from .reimbursement_mapper import transform_copayment, transform_reimbursement

__all__ = [
    "classification_level",
    "parent_code",
    "transform_atc_classification",
    "transform_chapter_iv_paragraph",
    "transform_company",
    "transform_standard_dosage",
    "transform_legal_basis",
    "transform_generic_product",
    "transform_ingredient",
    "transform_medication",
    "transform_medication_summary",
    "transform_vmp_group",
    "transform_copayment",
    "transform_reimbursement",
]
