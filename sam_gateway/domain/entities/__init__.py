"""Domain entities package"""

from .atc_classification import AtcClassification, AtcSearchResult, classification_level, parent_code
from .chapter_iv import ChapterIVParagraph, ChapterIVVerse
from .company import Company, CompanyAddress, VatNumber
from .generic_product import GenericComponent, GenericProduct, VmpGroupReference
from .legislation import LegalBasis, LegalReference, LegalText, legal_text
from .medication import (
    CnkCode,
    CodedName,
    DocumentLink,
    Ingredient,
    Medication,
    MedicationComponent,
    MedicationPackage,
    MedicationSummary,
    VmpGroup,
    sort_by_price,
)
from .medication_detail import MedicationDetail
from .reimbursement import Copayment, RegimeType, Reimbursement, ReimbursementCriterion
from .standard_dosage import (
    DosageAdditionalFields,
    DosageIndication,
    DosageParameter,
    DosageParameterBounds,
    DosageQuantity,
    DosageRoute,
    ParameterizedQuantity,
    StandardDosage,
    StandardRoute,
)

__all__ = [
    "AtcClassification",
    "AtcSearchResult",
    "classification_level",
    "parent_code",
    "ChapterIVParagraph",
    "ChapterIVVerse",
    "Company",
    "CompanyAddress",
    "VatNumber",
    "GenericComponent",
    "GenericProduct",
    "VmpGroupReference",
    "LegalBasis",
    "LegalReference",
    "LegalText",
    "legal_text",
    "CnkCode",
    "CodedName",
    "DocumentLink",
    "Ingredient",
    "Medication",
    "MedicationComponent",
    "MedicationPackage",
    "MedicationSummary",
    "VmpGroup",
    "sort_by_price",
    "MedicationDetail",
    "Copayment",
    "RegimeType",
    "Reimbursement",
    "ReimbursementCriterion",
    "DosageAdditionalFields",
    "DosageIndication",
    "DosageParameter",
    "DosageParameterBounds",
    "DosageQuantity",
    "DosageRoute",
    "ParameterizedQuantity",
    "StandardDosage",
    "StandardRoute",
]
