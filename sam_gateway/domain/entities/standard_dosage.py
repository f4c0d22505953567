"""
Standard dosage entities

Dosage recommendations published per generic prescription group (VMP group).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from sam_gateway.domain.value_objects.multilingual_text import MultilingualText


@dataclass(frozen=True)
class DosageQuantity:
    value: float
    unit: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "unit": self.unit}


@dataclass(frozen=True)
class DosageParameter:
    code: str
    name: Optional[MultilingualText] = None
    definition: Optional[MultilingualText] = None
    standard_unit: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "definition": self.definition,
            "standardUnit": self.standard_unit,
        }


@dataclass(frozen=True)
class DosageParameterBounds:
    parameter: DosageParameter
    lower_bound: Optional[DosageQuantity] = None
    upper_bound: Optional[DosageQuantity] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameter": self.parameter.to_dict(),
            "lowerBound": self.lower_bound.to_dict() if self.lower_bound else None,
            "upperBound": self.upper_bound.to_dict() if self.upper_bound else None,
        }


@dataclass(frozen=True)
class StandardRoute:
    standard: str
    code: str


@dataclass(frozen=True)
class DosageRoute:
    code: str
    name: Optional[MultilingualText] = None
    standard_route: Optional[StandardRoute] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "standardRoute": (
                {"standard": self.standard_route.standard, "code": self.standard_route.code}
                if self.standard_route
                else None
            ),
        }


@dataclass(frozen=True)
class DosageIndication:
    code: str
    name: Optional[MultilingualText] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "name": self.name}


@dataclass(frozen=True)
class ParameterizedQuantity:
    quantity: DosageQuantity
    multiplier: Optional[float] = None
    parameter: Optional[DosageParameter] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quantity": self.quantity.to_dict(),
            "multiplier": self.multiplier,
            "parameter": self.parameter.to_dict() if self.parameter else None,
        }


@dataclass(frozen=True)
class DosageAdditionalFields:
    posology: Optional[MultilingualText] = None
    dosage_string: Optional[MultilingualText] = None
    selection_string: Optional[MultilingualText] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "posology": self.posology,
            "dosageString": self.dosage_string,
            "selectionString": self.selection_string,
        }


@dataclass(frozen=True)
class StandardDosage:
    code: str
    target_group: str = "ADULT"
    kidney_failure_class: Optional[int] = None
    liver_failure_class: Optional[int] = None
    treatment_duration_type: str = "IF_NECESSARY"
    temporality_duration: Optional[DosageQuantity] = None
    temporality_user_provided: Optional[bool] = None
    temporality_note: Optional[MultilingualText] = None
    quantity: Optional[float] = None
    quantity_denominator: Optional[float] = None
    quantity_range_lower: Optional[float] = None
    quantity_range_upper: Optional[float] = None
    administration_frequency_quantity: Optional[float] = None
    administration_frequency_is_max: Optional[bool] = None
    administration_frequency_timeframe: Optional[DosageQuantity] = None
    maximum_administration_quantity: Optional[float] = None
    maximum_daily_quantity: Optional[ParameterizedQuantity] = None
    textual_dosage: Optional[MultilingualText] = None
    supplementary_info: Optional[MultilingualText] = None
    route_specification: Optional[MultilingualText] = None
    indication: Optional[DosageIndication] = None
    parameter_bounds: Tuple[DosageParameterBounds, ...] = field(default_factory=tuple)
    route_of_administration: Optional[DosageRoute] = None
    additional_fields: DosageAdditionalFields = field(default_factory=DosageAdditionalFields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "targetGroup": self.target_group,
            "kidneyFailureClass": self.kidney_failure_class,
            "liverFailureClass": self.liver_failure_class,
            "treatmentDurationType": self.treatment_duration_type,
            "temporalityDuration": _quantity_dict(self.temporality_duration),
            "temporalityUserProvided": self.temporality_user_provided,
            "temporalityNote": self.temporality_note,
            "quantity": self.quantity,
            "quantityDenominator": self.quantity_denominator,
            "quantityRangeLower": self.quantity_range_lower,
            "quantityRangeUpper": self.quantity_range_upper,
            "administrationFrequencyQuantity": self.administration_frequency_quantity,
            "administrationFrequencyIsMax": self.administration_frequency_is_max,
            "administrationFrequencyTimeframe": _quantity_dict(self.administration_frequency_timeframe),
            "maximumAdministrationQuantity": self.maximum_administration_quantity,
            "maximumDailyQuantity": (
                self.maximum_daily_quantity.to_dict() if self.maximum_daily_quantity else None
            ),
            "textualDosage": self.textual_dosage,
            "supplementaryInfo": self.supplementary_info,
            "routeSpecification": self.route_specification,
            "indication": self.indication.to_dict() if self.indication else None,
            "parameterBounds": [bounds.to_dict() for bounds in self.parameter_bounds],
            "routeOfAdministration": (
                self.route_of_administration.to_dict() if self.route_of_administration else None
            ),
            "additionalFields": self.additional_fields.to_dict(),
        }


def _quantity_dict(quantity: Optional[DosageQuantity]) -> Optional[Dict[str, Any]]:
    return quantity.to_dict() if quantity else None
