"""Medication detail: one AMP together with its reimbursement and generic context."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sam_gateway.domain.entities.generic_product import GenericProduct
from sam_gateway.domain.entities.medication import Medication, MedicationSummary
from sam_gateway.domain.entities.reimbursement import Reimbursement


@dataclass(frozen=True)
class MedicationDetail:
    medication: Medication
    reimbursements: Tuple[Reimbursement, ...] = field(default_factory=tuple)
    generic_product: Optional[GenericProduct] = None
    # Other brands of the same generic product, cheapest first.
    equivalents: Tuple[MedicationSummary, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medication": self.medication.to_dict(),
            "reimbursement": [item.to_dict() for item in self.reimbursements],
            "genericProduct": self.generic_product.to_dict() if self.generic_product else None,
            "equivalents": [item.to_dict() for item in self.equivalents],
        }
