"""Domain exceptions."""
from __future__ import annotations

from typing import Optional


class SamGatewayError(Exception):
    """Base exception for registry access errors.

    Every subclass carries a stable ``code`` that ends up in the failure
    variant of an ``ApiResult``.
    """

    code = "UNKNOWN"

    def __init__(self, message: str, *, code: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.cause = cause


class InvalidParameterError(SamGatewayError):
    """Raised before any network call when query parameters are unusable."""

    code = "INVALID_PARAMETER"

    def __init__(self, parameter: str, message: str):
        super().__init__(message)
        self.parameter = parameter


class MalformedResponseError(SamGatewayError):
    """Raised when the registry response cannot be read as expected."""

    code = "PARSE_ERROR"


class UpstreamFaultError(SamGatewayError):
    """Raised when the registry answers with a SOAP fault that is not a "no results" signal."""

    code = "SOAP_FAULT"

    def __init__(self, message: str, *, fault_code: Optional[str] = None):
        super().__init__(message)
        self.fault_code = fault_code


class IncompleteRecordError(SamGatewayError):
    """Raised when a record lacks a field the domain model treats as mandatory."""

    code = "INCOMPLETE_RECORD"

    def __init__(self, entity_type: str, field_name: str):
        super().__init__(f"{entity_type} record is missing mandatory field '{field_name}'")
        self.entity_type = entity_type
        self.field_name = field_name


class NotFoundError(SamGatewayError):
    """Raised by detail lookups when the registry has no matching record."""

    code = "NOT_FOUND"

    def __init__(self, entity_type: str, identifier: str):
        super().__init__(f"{entity_type} '{identifier}' not found")
        self.entity_type = entity_type
        self.identifier = identifier


class TransportError(SamGatewayError):
    """Raised when the upstream service cannot be reached."""

    code = "REQUEST_FAILED"


class TransportTimeoutError(TransportError):
    """Raised when an outbound call exceeds its timeout."""

    code = "TIMEOUT"


class DocumentProxyError(SamGatewayError):
    """Base for document proxy policy violations; maps onto an HTTP status."""

    status_code = 500


class RateLimitExceeded(DocumentProxyError):
    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, retry_after: int):
        super().__init__("Rate limit exceeded")
        self.retry_after = retry_after


class NotAllowed(DocumentProxyError):
    code = "NOT_ALLOWED"
    status_code = 403


class DocumentTooLarge(DocumentProxyError):
    code = "FILE_TOO_LARGE"
    status_code = 413

    def __init__(self, limit_bytes: int, actual_bytes: Optional[int] = None):
        super().__init__("File too large")
        self.limit_bytes = limit_bytes
        self.actual_bytes = actual_bytes


class UnsupportedContentType(DocumentProxyError):
    code = "INVALID_CONTENT_TYPE"
    status_code = 400

    def __init__(self, content_type: str):
        super().__init__("Invalid content type")
        self.content_type = content_type


class DocumentFetchError(DocumentProxyError):
    code = "FETCH_FAILED"
    status_code = 500


class DocumentFetchTimeout(DocumentProxyError):
    code = "TIMEOUT"
    status_code = 504
