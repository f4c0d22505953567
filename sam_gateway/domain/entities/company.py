"""Pharmaceutical company entity."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class VatNumber:
    country_code: str
    number: str

    def __str__(self) -> str:
        return f"{self.country_code}{self.number}"


@dataclass(frozen=True)
class CompanyAddress:
    street: Optional[str] = None
    number: Optional[str] = None
    postbox: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    country_code: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(
            (self.street, self.number, self.postbox, self.postcode, self.city, self.country_code)
        )


@dataclass(frozen=True)
class Company:
    actor_nr: str
    name: str
    legal_form: Optional[str] = None
    vat_nr: Optional[VatNumber] = None
    address: Optional[CompanyAddress] = None
    phone: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actorNr": self.actor_nr,
            "name": self.name,
            "legalForm": self.legal_form,
            "vatNr": (
                {"countryCode": self.vat_nr.country_code, "number": self.vat_nr.number}
                if self.vat_nr
                else None
            ),
            "address": (
                {
                    "street": self.address.street,
                    "number": self.address.number,
                    "postbox": self.address.postbox,
                    "postcode": self.address.postcode,
                    "city": self.address.city,
                    "countryCode": self.address.country_code,
                }
                if self.address
                else None
            ),
            "phone": self.phone,
            "language": self.language,
        }
