"""Shared plumbing for registry-backed query handlers."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from sam_gateway.application.dto.api_result import ApiResult, ResultMeta
from sam_gateway.domain.exceptions import SamGatewayError
from sam_gateway.infrastructure.soap.envelope_builder import SearchParams
from sam_gateway.infrastructure.soap.registry_client import SamRegistryClient
from sam_gateway.infrastructure.soap.response_parser import ParsedResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


def pad_actor_nr(actor_nr: Optional[str], width: int) -> Optional[str]:
    """Company actor numbers are fixed-width, zero-padded strings upstream."""
    if actor_nr is None:
        return None
    stripped = actor_nr.strip()
    return stripped.rjust(width, "0") if stripped else None


class RegistryQueryHandler:
    """Base for handlers that run one registry operation.

    Subclasses describe how to turn the parsed response into their result
    data; this class turns every ``SamGatewayError`` into a failed result.
    """

    operation: str = ""

    def __init__(self, registry: SamRegistryClient):
        self._registry = registry

    async def _run(
        self,
        params: SearchParams,
        build: Callable[[ParsedResponse], T],
        *,
        count: Optional[Callable[[T], int]] = len,
    ) -> ApiResult[T]:
        try:
            parsed = await self._registry.execute(self.operation, params)
            data = build(parsed)
        except SamGatewayError as exc:
            self._log_failure(exc)
            return ApiResult.from_exception(exc)

        meta = ResultMeta(
            search_date=parsed.search_date,
            sam_id=parsed.sam_id,
            total_results=count(data) if count else None,
        )
        return ApiResult.ok(data, meta=meta)

    def _log_failure(self, exc: SamGatewayError) -> None:
        extra: dict[str, Any] = {"operation": self.operation, "error_code": exc.code}
        if exc.code == "INVALID_PARAMETER":
            logger.info("%s rejected: %s", self.operation, exc.message, extra=extra)
        else:
            logger.warning("%s failed: %s", self.operation, exc.message, extra=extra)
