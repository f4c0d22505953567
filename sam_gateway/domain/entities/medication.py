"""Medication entities (branded products, their packages and generic prescription groups)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sam_gateway.domain.value_objects.multilingual_text import MultilingualText


@dataclass(frozen=True)
class MedicationSummary:
    """Lightweight view of an actual medicinal product (AMP) for result lists."""

    amp_code: str
    name: str
    name_language: Optional[str] = None
    name_is_fallback: bool = False
    names: Optional[MultilingualText] = None
    official_name: Optional[str] = None
    vmp_code: Optional[str] = None
    company_actor_nr: Optional[str] = None
    status: str = "AUTHORIZED"
    black_triangle: bool = False
    medicine_type: Optional[str] = None
    cnk: Optional[str] = None
    price: Optional[float] = None
    is_reimbursed: bool = False
    pack_display_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ampCode": self.amp_code,
            "name": self.name,
            "nameLanguage": self.name_language,
            "isFallback": self.name_is_fallback,
            "allNames": self.names,
            "officialName": self.official_name,
            "vmpCode": self.vmp_code,
            "companyActorNr": self.company_actor_nr,
            "status": self.status,
            "blackTriangle": self.black_triangle,
            "medicineType": self.medicine_type,
            "cnk": self.cnk,
            "price": self.price,
            "isReimbursed": self.is_reimbursed,
            "packDisplayValue": self.pack_display_value,
        }


@dataclass(frozen=True)
class VmpGroup:
    """Group of therapeutically equivalent generic products."""

    code: str
    name: str
    name_language: Optional[str] = None
    name_is_fallback: bool = False
    names: Optional[MultilingualText] = None
    no_generic_prescription_reason: Optional[str] = None
    no_switch_reason: Optional[str] = None
    patient_frailty_indicator: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "nameLanguage": self.name_language,
            "isFallback": self.name_is_fallback,
            "allNames": self.names,
            "noGenericPrescriptionReason": self.no_generic_prescription_reason,
            "noSwitchReason": self.no_switch_reason,
            "patientFrailtyIndicator": self.patient_frailty_indicator,
        }


@dataclass(frozen=True)
class Ingredient:
    rank: int
    type: str
    substance_code: str
    substance_name: str
    strength_description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "type": self.type,
            "substanceCode": self.substance_code,
            "substanceName": self.substance_name,
            "strengthDescription": self.strength_description,
        }


@dataclass(frozen=True)
class CodedName:
    """A coded reference value, e.g. a pharmaceutical form or route."""

    code: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "name": self.name}


@dataclass(frozen=True)
class CnkCode:
    code: str
    delivery_environment: str = "P"  # P=public pharmacy, H=hospital
    price: Optional[float] = None
    cheap: bool = False
    cheapest: bool = False
    reimbursable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "deliveryEnvironment": self.delivery_environment,
            "price": self.price,
            "cheap": self.cheap,
            "cheapest": self.cheapest,
            "reimbursable": self.reimbursable,
        }


@dataclass(frozen=True)
class DocumentLink:
    url: str
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "language": self.language}


@dataclass(frozen=True)
class MedicationPackage:
    cti_extended: Optional[str] = None
    name: str = ""
    authorisation_nr: Optional[str] = None
    orphan: bool = False
    leaflet: Optional[DocumentLink] = None
    spc: Optional[DocumentLink] = None
    all_leaflets: Tuple[DocumentLink, ...] = field(default_factory=tuple)
    all_spcs: Tuple[DocumentLink, ...] = field(default_factory=tuple)
    pack_display_value: Optional[str] = None
    status: Optional[str] = None
    ex_factory_price: Optional[float] = None
    atc_code: Optional[str] = None
    cnk_codes: Tuple[CnkCode, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ctiExtended": self.cti_extended,
            "name": self.name,
            "authorisationNr": self.authorisation_nr,
            "orphan": self.orphan,
            "leaflet": self.leaflet.to_dict() if self.leaflet else None,
            "spc": self.spc.to_dict() if self.spc else None,
            "allLeaflets": [link.to_dict() for link in self.all_leaflets],
            "allSpcs": [link.to_dict() for link in self.all_spcs],
            "packDisplayValue": self.pack_display_value,
            "status": self.status,
            "exFactoryPrice": self.ex_factory_price,
            "atcCode": self.atc_code,
            "cnkCodes": [cnk.to_dict() for cnk in self.cnk_codes],
        }


@dataclass(frozen=True)
class MedicationComponent:
    sequence_nr: int = 0
    pharmaceutical_form: Optional[CodedName] = None
    route_of_administration: Optional[CodedName] = None
    ingredients: Tuple[Ingredient, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequenceNr": self.sequence_nr,
            "pharmaceuticalForm": self.pharmaceutical_form.to_dict() if self.pharmaceutical_form else None,
            "routeOfAdministration": (
                self.route_of_administration.to_dict() if self.route_of_administration else None
            ),
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
        }


@dataclass(frozen=True)
class Medication:
    """Full view of an actual medicinal product (AMP) with its packages."""

    amp_code: str
    name: str
    name_language: Optional[str] = None
    name_is_fallback: bool = False
    names: Optional[MultilingualText] = None
    abbreviated_name: Optional[str] = None
    official_name: Optional[str] = None
    company_actor_nr: Optional[str] = None
    black_triangle: bool = False
    medicine_type: Optional[str] = None
    status: str = "AUTHORIZED"
    vmp_code: Optional[str] = None
    packages: Tuple[MedicationPackage, ...] = field(default_factory=tuple)
    components: Tuple[MedicationComponent, ...] = field(default_factory=tuple)

    def public_cnk(self) -> Optional[str]:
        """First CNK sold in public pharmacies across all packages."""
        for package in self.packages:
            for cnk in package.cnk_codes:
                if cnk.delivery_environment == "P":
                    return cnk.code
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ampCode": self.amp_code,
            "name": self.name,
            "nameLanguage": self.name_language,
            "isFallback": self.name_is_fallback,
            "allNames": self.names,
            "abbreviatedName": self.abbreviated_name,
            "officialName": self.official_name,
            "companyActorNr": self.company_actor_nr,
            "blackTriangle": self.black_triangle,
            "medicineType": self.medicine_type,
            "status": self.status,
            "vmpCode": self.vmp_code,
            "packages": [package.to_dict() for package in self.packages],
            "components": [component.to_dict() for component in self.components],
        }


def sort_by_price(medications: List[MedicationSummary]) -> List[MedicationSummary]:
    """Cheapest first; products without a price go last."""
    return sorted(medications, key=lambda item: (item.price is None, item.price or 0.0))
