"""API v1 routers package."""

from . import (
    atc,
    chapter_iv,
    companies,
    document_proxy,
    dosages,
    generic_products,
    health,
    legislation,
    medications,
    reimbursement,
    vmp_groups,
)

__all__ = [
    "atc",
    "chapter_iv",
    "companies",
    "document_proxy",
    "dosages",
    "generic_products",
    "health",
    "legislation",
    "medications",
    "reimbursement",
    "vmp_groups",
]
