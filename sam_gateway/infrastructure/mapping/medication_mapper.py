"""Map AMP, VMP and VMP group records."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple, Union

from sam_gateway.domain.entities.generic_product import GenericComponent, GenericProduct, VmpGroupReference
from sam_gateway.domain.entities.medication import (
    CnkCode,
    CodedName,
    DocumentLink,
    Ingredient,
    Medication,
    MedicationComponent,
    MedicationPackage,
    MedicationSummary,
    VmpGroup,
)
from sam_gateway.domain.value_objects.language import Language
from sam_gateway.domain.value_objects.multilingual_text import localized_text, resolve_text

from .record_fields import (
    as_list,
    as_mapping,
    attribute,
    field_text,
    multilingual,
    require,
    to_bool,
    to_float,
    to_int,
)


def transform_medication_summary(
    record: Mapping[str, Any],
    language: Union[Language, str],
) -> MedicationSummary:
    """
    Build the search-list view of an AMP.

    CNK, price and reimbursement flag come from the first public (``P``)
    delivery of the first package.
    """
    amp_code = require(attribute(record, "Code"), "Medication", "amp_code")

    names = multilingual(record.get("Name"))
    resolved = resolve_text(names, language)
    official_name = field_text(record, "OfficialName")

    first_package = as_mapping(record.get("Ampp"))
    public_delivery = next(
        (
            dmpp
            for dmpp in as_list(first_package.get("Dmpp"))
            if isinstance(dmpp, Mapping) and (attribute(dmpp, "DeliveryEnvironment") or "P") == "P"
        ),
        {},
    )

    return MedicationSummary(
        amp_code=amp_code,
        name=resolved.text or official_name or amp_code,
        name_language=resolved.language,
        name_is_fallback=resolved.is_fallback,
        names=names,
        official_name=official_name,
        vmp_code=attribute(record, "VmpCode"),
        company_actor_nr=field_text(record, "CompanyActorNr"),
        black_triangle=bool(to_bool(record.get("BlackTriangle"))),
        medicine_type=field_text(record, "MedicineType"),
        cnk=attribute(public_delivery, "Code"),
        price=to_float(public_delivery.get("Price")),
        is_reimbursed=bool(to_bool(public_delivery.get("Reimbursable"))),
        pack_display_value=field_text(first_package, "PackDisplayValue"),
    )


def transform_vmp_group(record: Mapping[str, Any], language: Union[Language, str]) -> VmpGroup:
    code = require(attribute(record, "Code"), "VmpGroup", "code")

    names = multilingual(record.get("Name"))
    resolved = resolve_text(names, language)

    return VmpGroup(
        code=code,
        name=resolved.text or code,
        name_language=resolved.language,
        name_is_fallback=resolved.is_fallback,
        names=names,
        no_generic_prescription_reason=field_text(record, "NoGenericPrescriptionReason"),
        no_switch_reason=field_text(record, "NoSwitchReason"),
        patient_frailty_indicator=to_bool(record.get("PatientFrailtyIndicator")),
    )


def transform_ingredient(raw: Mapping[str, Any], language: Union[Language, str]) -> Ingredient:
    """Actual (AMP) and virtual (VMP) ingredients share this shape."""
    substance = as_mapping(raw.get("Substance"))
    return Ingredient(
        rank=to_int(raw.get("@Rank")) or 0,
        type=field_text(raw, "Type") or "UNKNOWN",
        substance_code=attribute(substance, "Code") or "",
        substance_name=localized_text(multilingual(substance.get("Name")), language),
        strength_description=field_text(raw, "StrengthDescription") or field_text(raw, "StrengthRange"),
    )


def _coded_name(value: Any, language: Union[Language, str]) -> Optional[CodedName]:
    raw = as_mapping(value)
    if not raw:
        return None
    return CodedName(
        code=attribute(raw, "Code") or "",
        name=localized_text(multilingual(raw.get("Name")), language),
    )


def _documents(
    value: Any,
    language: Union[Language, str],
) -> Tuple[Optional[DocumentLink], Tuple[DocumentLink, ...]]:
    urls = multilingual(value)
    if not urls:
        return None, ()
    resolved = resolve_text(urls, language)
    best = DocumentLink(url=resolved.text, language=resolved.language) if resolved.text else None
    return best, tuple(DocumentLink(url=url, language=code) for code, url in urls.items())


def _transform_cnk(raw: Mapping[str, Any]) -> CnkCode:
    return CnkCode(
        code=attribute(raw, "Code") or "",
        delivery_environment=attribute(raw, "DeliveryEnvironment") or "P",
        price=to_float(raw.get("Price")),
        cheap=bool(to_bool(raw.get("Cheap"))),
        cheapest=bool(to_bool(raw.get("Cheapest"))),
        reimbursable=bool(to_bool(raw.get("Reimbursable"))),
    )


def _transform_package(raw: Mapping[str, Any], language: Union[Language, str]) -> MedicationPackage:
    leaflet, all_leaflets = _documents(raw.get("LeafletUrl"), language)
    spc, all_spcs = _documents(raw.get("SpcUrl"), language)
    return MedicationPackage(
        cti_extended=attribute(raw, "CtiExtended"),
        name=localized_text(multilingual(raw.get("PrescriptionName")), language),
        authorisation_nr=field_text(raw, "AuthorisationNr"),
        orphan=bool(to_bool(raw.get("Orphan"))),
        leaflet=leaflet,
        spc=spc,
        all_leaflets=all_leaflets,
        all_spcs=all_spcs,
        pack_display_value=field_text(raw, "PackDisplayValue"),
        status=field_text(raw, "Status"),
        ex_factory_price=to_float(raw.get("ExFactoryPrice")),
        atc_code=attribute(as_mapping(raw.get("Atc")), "Code"),
        cnk_codes=tuple(_transform_cnk(dmpp) for dmpp in as_list(raw.get("Dmpp")) if isinstance(dmpp, Mapping)),
    )


def _transform_component(raw: Mapping[str, Any], language: Union[Language, str]) -> MedicationComponent:
    return MedicationComponent(
        sequence_nr=to_int(raw.get("@SequenceNr")) or 0,
        pharmaceutical_form=_coded_name(raw.get("PharmaceuticalForm"), language),
        route_of_administration=_coded_name(raw.get("RouteOfAdministration"), language),
        ingredients=tuple(
            transform_ingredient(item, language)
            for item in as_list(raw.get("RealActualIngredient"))
            if isinstance(item, Mapping)
        ),
    )


def transform_medication(record: Mapping[str, Any], language: Union[Language, str]) -> Medication:
    """Build the detail view of an AMP with every package and component."""
    amp_code = require(attribute(record, "Code"), "Medication", "amp_code")

    names = multilingual(record.get("Name"))
    resolved = resolve_text(names, language)
    official_name = field_text(record, "OfficialName")

    return Medication(
        amp_code=amp_code,
        name=resolved.text or official_name or amp_code,
        name_language=resolved.language,
        name_is_fallback=resolved.is_fallback,
        names=names,
        abbreviated_name=localized_text(multilingual(record.get("AbbreviatedName")), language) or None,
        official_name=official_name,
        company_actor_nr=field_text(record, "CompanyActorNr"),
        black_triangle=bool(to_bool(record.get("BlackTriangle"))),
        medicine_type=field_text(record, "MedicineType"),
        vmp_code=attribute(record, "VmpCode"),
        packages=tuple(
            _transform_package(item, language) for item in as_list(record.get("Ampp")) if isinstance(item, Mapping)
        ),
        components=tuple(
            _transform_component(item, language)
            for item in as_list(record.get("AmpComponent"))
            if isinstance(item, Mapping)
        ),
    )


def transform_generic_product(record: Mapping[str, Any], language: Union[Language, str]) -> GenericProduct:
    vmp_code = require(attribute(record, "Code"), "GenericProduct", "vmp_code")

    names = multilingual(record.get("Name"))
    resolved = resolve_text(names, language)

    group = as_mapping(record.get("VmpGroup"))
    vmp_group = None
    if group:
        group_names = multilingual(group.get("Name"))
        group_resolved = resolve_text(group_names, language)
        vmp_group = VmpGroupReference(
            code=attribute(group, "Code") or "",
            name=group_resolved.text,
            name_language=group_resolved.language,
            names=group_names,
        )

    components = [
        GenericComponent(
            sequence_nr=to_int(raw.get("@SequenceNr")) or 0,
            name=localized_text(multilingual(raw.get("Name")), language) or None,
            ingredients=tuple(
                transform_ingredient(item, language)
                for item in as_list(raw.get("VirtualIngredient"))
                if isinstance(item, Mapping)
            ),
        )
        for raw in as_list(record.get("VmpComponent"))
        if isinstance(raw, Mapping)
    ]

    return GenericProduct(
        vmp_code=vmp_code,
        name=resolved.text or vmp_code,
        name_language=resolved.language,
        name_is_fallback=resolved.is_fallback,
        names=names,
        abbreviated_name=localized_text(multilingual(record.get("AbbreviatedName")), language) or None,
        vtm_code=attribute(as_mapping(record.get("Vtm")), "Code"),
        vmp_group=vmp_group,
        components=tuple(components),
    )
