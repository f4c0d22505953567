"""Map standard dosage records."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

from sam_gateway.domain.entities.standard_dosage import (
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

from .record_fields import (
    as_list,
    as_mapping,
    attribute,
    field_text,
    first,
    keyed_multilingual,
    multilingual,
    require,
    to_bool,
    to_float,
    to_int,
)


def _code(raw: Mapping[str, Any]) -> Optional[str]:
    # Dosage sub-elements use a lowercase ``code`` attribute.
    return attribute(raw, "code") or attribute(raw, "Code")


def _quantity(value: Any) -> Optional[DosageQuantity]:
    number = to_float(value)
    if number is None:
        return None
    raw = first(value)
    unit = attribute(raw, "Unit") if isinstance(raw, Mapping) else None
    return DosageQuantity(value=number, unit=unit or "")


def _parameter(value: Any) -> Optional[DosageParameter]:
    raw = as_mapping(value)
    if not raw:
        return None
    return DosageParameter(
        code=_code(raw) or "",
        name=multilingual(raw.get("Name")),
        definition=multilingual(raw.get("Definition")),
        standard_unit=field_text(raw, "StandardUnit"),
    )


def _parameter_bounds(values: Any) -> Tuple[DosageParameterBounds, ...]:
    bounds: List[DosageParameterBounds] = []
    for raw in as_list(values):
        if not isinstance(raw, Mapping):
            continue
        parameter = _parameter(raw.get("DosageParameter"))
        if parameter is None:
            continue
        bounds.append(
            DosageParameterBounds(
                parameter=parameter,
                lower_bound=_quantity(raw.get("LowerBound")),
                upper_bound=_quantity(raw.get("UpperBound")),
            )
        )
    return tuple(bounds)


def _route(values: Any) -> Optional[DosageRoute]:
    raw = as_mapping(values)
    if not raw:
        return None
    standard_route = None
    raw_standard = as_mapping(raw.get("StandardRoute"))
    if raw_standard:
        standard_route = StandardRoute(
            standard=attribute(raw_standard, "Standard") or "",
            code=attribute(raw_standard, "Code") or "",
        )
    return DosageRoute(
        code=attribute(raw, "Code") or "",
        name=multilingual(raw.get("Name")),
        standard_route=standard_route,
    )


def _indication(value: Any) -> Optional[DosageIndication]:
    raw = as_mapping(value)
    if not raw:
        return None
    return DosageIndication(code=_code(raw) or "", name=multilingual(raw.get("Name")))


def _maximum_daily_quantity(value: Any) -> Optional[ParameterizedQuantity]:
    raw = as_mapping(value)
    quantity = _quantity(raw.get("Quantity")) if raw else None
    if quantity is None:
        return None
    return ParameterizedQuantity(
        quantity=quantity,
        multiplier=to_float(raw.get("Multiplier")),
        parameter=_parameter(raw.get("Parameter")),
    )


def _additional_fields(values: Any) -> DosageAdditionalFields:
    pairs = [
        (field_text(raw, "Key"), field_text(raw, "Value"))
        for raw in as_list(values)
        if isinstance(raw, Mapping)
    ]
    return DosageAdditionalFields(
        posology=keyed_multilingual(pairs, "posology_"),
        dosage_string=keyed_multilingual(pairs, "dosage_string_"),
        selection_string=keyed_multilingual(pairs, "selection_string_"),
    )


def transform_standard_dosage(record: Mapping[str, Any]) -> StandardDosage:
    code = require(attribute(record, "Code"), "StandardDosage", "code")

    return StandardDosage(
        code=code,
        target_group=field_text(record, "TargetGroup") or "ADULT",
        kidney_failure_class=to_int(record.get("KidneyFailureClass")),
        liver_failure_class=to_int(record.get("LiverFailureClass")),
        treatment_duration_type=field_text(record, "TreatmentDurationType") or "IF_NECESSARY",
        temporality_duration=_quantity(record.get("TemporalityDuration")),
        temporality_user_provided=to_bool(record.get("TemporalityUserProvided")),
        temporality_note=multilingual(record.get("TemporalityNote")),
        quantity=to_float(record.get("Quantity")),
        quantity_denominator=to_float(record.get("QuantityDenominator")),
        quantity_range_lower=to_float(record.get("QuantityRangeLower")),
        quantity_range_upper=to_float(record.get("QuantityRangeUpper")),
        administration_frequency_quantity=to_float(record.get("AdministrationFrequencyQuantity")),
        administration_frequency_is_max=to_bool(record.get("AdministrationFrequencyIsMax")),
        administration_frequency_timeframe=_quantity(record.get("AdministrationFrequencyTimeframe")),
        maximum_administration_quantity=to_float(record.get("MaximumAdministrationQuantity")),
        maximum_daily_quantity=_maximum_daily_quantity(record.get("MaximumDailyQuantity")),
        textual_dosage=multilingual(record.get("TextualDosage")),
        supplementary_info=multilingual(record.get("SupplementaryInfo")),
        route_specification=multilingual(record.get("RouteSpecification")),
        indication=_indication(record.get("Indication")),
        parameter_bounds=_parameter_bounds(record.get("ParameterBounds")),
        route_of_administration=_route(record.get("RouteOfAdministration")),
        additional_fields=_additional_fields(record.get("AdditionalFields")),
    )
