"""SAM v2 SOAP access: envelope building, transport and response parsing."""

from .envelope_builder import (
    FindAmpParams,
    FindChapterIVParams,
    FindCommentedClassificationParams,
    FindCompanyParams,
    FindLegislationTextParams,
    FindReimbursementParams,
    FindStandardDosageParams,
    FindVmpGroupParams,
    FindVmpParams,
    SamEnvelopeBuilder,
)
from .operations import OPERATIONS, SamOperation, get_operation
from .registry_client import SamRegistryClient
from .response_parser import ParsedResponse, RawRecord, SamResponseParser
from .transport_client import SamTransportClient

__all__ = [
    "FindAmpParams",
    "FindChapterIVParams",
    "FindCommentedClassificationParams",
    "FindCompanyParams",
    "FindLegislationTextParams",
    "FindReimbursementParams",
    "FindStandardDosageParams",
    "FindVmpGroupParams",
    "FindVmpParams",
    "SamEnvelopeBuilder",
    "OPERATIONS",
    "SamOperation",
    "get_operation",
    "SamRegistryClient",
    "ParsedResponse",
    "RawRecord",
    "SamResponseParser",
    "SamTransportClient",
]
