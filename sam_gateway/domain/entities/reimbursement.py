"""Reimbursement entities."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class RegimeType(str, Enum):
    """Patient copayment regimes."""
    PREFERENTIAL = "PREFERENTIAL"
    REGULAR = "REGULAR"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Copayment:
    """What the patient pays and what the insurer pays under one regime.

    ``raw_regime`` keeps the upstream code when it is not a known regime.
    """

    regime: RegimeType
    raw_regime: Optional[str] = None
    fee_amount: Optional[float] = None
    reimbursement_amount: Optional[float] = None

    @property
    def regimen(self) -> str:
        if self.regime is RegimeType.UNKNOWN and self.raw_regime:
            return self.raw_regime
        return self.regime.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regimen": self.regimen,
            "regimeType": self.regime.value,
            "rawRegimeType": self.raw_regime,
            "feeAmount": self.fee_amount,
            "reimbursementAmount": self.reimbursement_amount,
        }


@dataclass(frozen=True)
class ReimbursementCriterion:
    category: str
    code: str


@dataclass(frozen=True)
class Reimbursement:
    """Reimbursement context of one delivered package (CNK)."""

    cnk: str
    delivery_environment: str = "P"
    legal_reference_path: Optional[str] = None
    criterion: Optional[ReimbursementCriterion] = None
    copayments: Tuple[Copayment, ...] = field(default_factory=tuple)
    reference_base_price: Optional[float] = None
    reimbursement_base_price: Optional[float] = None
    reference_price: Optional[float] = None
    start_date: Optional[str] = None

    @property
    def is_chapter_iv(self) -> bool:
        """Chapter IV paragraphs need prior authorisation; their path carries an ``IV`` segment."""
        if not self.legal_reference_path:
            return False
        return "IV" in self.legal_reference_path.split("-")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cnk": self.cnk,
            "deliveryEnvironment": self.delivery_environment,
            "legalReferencePath": self.legal_reference_path,
            "isChapterIV": self.is_chapter_iv,
            "criterion": (
                {"category": self.criterion.category, "code": self.criterion.code}
                if self.criterion
                else None
            ),
            "copayments": [copayment.to_dict() for copayment in self.copayments],
            "referenceBasePrice": self.reference_base_price,
            "reimbursementBasePrice": self.reimbursement_base_price,
            "referencePrice": self.reference_price,
            "startDate": self.start_date,
        }
