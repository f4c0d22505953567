"""Map company records."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from sam_gateway.domain.entities.company import Company, CompanyAddress, VatNumber

from .record_fields import as_mapping, attribute, field_text, first, require, text_value


def _vat_number(value: Any) -> Optional[VatNumber]:
    number = text_value(value)
    if number is None:
        return None
    raw = first(value)
    country_code = attribute(raw, "CountryCode") if isinstance(raw, Mapping) else None
    return VatNumber(country_code=country_code or "", number=number)


def transform_company(record: Mapping[str, Any]) -> Company:
    actor_nr = require(attribute(record, "ActorNr"), "Company", "actor_nr")

    address = CompanyAddress(
        street=field_text(record, "StreetName"),
        number=field_text(record, "StreetNum"),
        postbox=field_text(record, "Postbox"),
        postcode=field_text(record, "Postcode"),
        city=field_text(record, "City"),
        country_code=field_text(record, "CountryCode"),
    )

    return Company(
        actor_nr=actor_nr,
        name=field_text(record, "Denomination") or "",
        legal_form=field_text(record, "LegalForm"),
        vat_nr=_vat_number(record.get("VatNr")),
        address=None if address.is_empty() else address,
        phone=field_text(record, "Phone"),
        language=field_text(record, "Language"),
    )
