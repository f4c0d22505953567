"""Map reimbursement context records."""
from __future__ import annotations

from typing import Any, Mapping

from sam_gateway.constants import COPAYMENT_REGIME_TYPES
from sam_gateway.domain.entities.reimbursement import (
    Copayment,
    RegimeType,
    Reimbursement,
    ReimbursementCriterion,
)

from .record_fields import as_list, as_mapping, attribute, require, to_float


def transform_copayment(raw: Mapping[str, Any]) -> Copayment:
    """Regime type ``1`` is preferential, ``2`` regular; other codes are kept verbatim as UNKNOWN."""
    raw_regime = attribute(raw, "RegimeType")
    known = COPAYMENT_REGIME_TYPES.get(raw_regime or "")
    return Copayment(
        regime=RegimeType(known) if known else RegimeType.UNKNOWN,
        raw_regime=raw_regime,
        fee_amount=to_float(raw.get("FeeAmount")),
        reimbursement_amount=to_float(raw.get("ReimbursementAmount")),
    )


def transform_reimbursement(record: Mapping[str, Any]) -> Reimbursement:
    cnk = require(attribute(record, "Code"), "Reimbursement", "cnk")

    criterion = None
    raw_criterion = as_mapping(record.get("ReimbursementCriterion"))
    if raw_criterion:
        criterion = ReimbursementCriterion(
            category=attribute(raw_criterion, "Category") or "",
            code=attribute(raw_criterion, "Code") or "",
        )

    copayments = tuple(
        transform_copayment(raw)
        for raw in as_list(record.get("Copayment"))
        if isinstance(raw, Mapping)
    )

    return Reimbursement(
        cnk=cnk,
        delivery_environment=attribute(record, "DeliveryEnvironment") or "P",
        legal_reference_path=attribute(record, "LegalReferencePath"),
        criterion=criterion,
        copayments=copayments,
        reference_base_price=to_float(record.get("ReferenceBasePrice")),
        reimbursement_base_price=to_float(record.get("ReimbursementBasePrice")),
        reference_price=to_float(record.get("ReferencePrice")),
        start_date=attribute(record, "StartDate"),
    )
