"""
Result envelope returned by every query handler.

Handlers never raise registry errors to their callers; they return either a
success carrying data or a failure carrying an error code and message.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from sam_gateway.domain.exceptions import SamGatewayError

T = TypeVar("T")


@dataclass(frozen=True)
class ApiError:
    """Error details of a failed result."""

    code: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class ResultMeta:
    """Registry metadata echoed from the parsed response."""

    search_date: Optional[str] = None
    sam_id: Optional[str] = None
    total_results: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"searchDate": self.search_date, "samId": self.sam_id}
        if self.total_results is not None:
            payload["totalResults"] = self.total_results
        return payload


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """
    Either ``data`` or ``error`` is populated, never both, and ``success``
    agrees with which one it is.

    Raises:
        ValueError: On construction with an inconsistent combination.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[ApiError] = None
    meta: Optional[ResultMeta] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("A failed result requires an error")
        if not self.success and self.data is not None:
            raise ValueError("A failed result cannot carry data")
        if self.success and self.data is None:
            raise ValueError("A successful result requires data")

    @classmethod
    def ok(cls, data: T, meta: Optional[ResultMeta] = None) -> "ApiResult[T]":
        return cls(success=True, data=data, meta=meta)

    @classmethod
    def failure(cls, code: str, message: str, meta: Optional[ResultMeta] = None) -> "ApiResult[T]":
        return cls(success=False, error=ApiError(code=code, message=message), meta=meta)

    @classmethod
    def from_exception(cls, exc: SamGatewayError) -> "ApiResult[T]":
        return cls.failure(exc.code, exc.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the camelCase wire form. Entities expose their own ``to_dict``."""
        payload: Dict[str, Any] = {"success": self.success}
        if self.success:
            payload["data"] = _serialise(self.data)
        else:
            payload["error"] = self.error.to_dict()  # type: ignore[union-attr]
        if self.meta is not None:
            payload["meta"] = self.meta.to_dict()
        return payload


def _serialise(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialise(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialise(item) for key, item in value.items()}
    return value
