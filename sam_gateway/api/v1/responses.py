"""Translate handler results into HTTP responses."""
from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from sam_gateway.api.schemas import ApiResponseSchema
from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.domain.value_objects.cache_policy import CachePolicy

_STATUS_BY_ERROR_CODE = {
    "INVALID_PARAMETER": 400,
    "NOT_FOUND": 404,
    "TIMEOUT": 504,
}

NO_STORE = "no-store"


def status_for_error(code: str) -> int:
    """Caller mistakes are 400, missing records 404, upstream timeouts 504, anything else 502."""
    return _STATUS_BY_ERROR_CODE.get(code, 502)


def result_response(result: ApiResult[Any], policy: CachePolicy) -> JSONResponse:
    body = ApiResponseSchema.model_validate(result.to_dict())
    content = body.model_dump(exclude_none=True, exclude={"data"})

    if result.success:
        content["data"] = body.data
        return JSONResponse(content=content, headers={"Cache-Control": policy.cache_control_header()})

    return JSONResponse(
        status_code=status_for_error(body.error.code),  # type: ignore[union-attr]
        content=content,
        headers={"Cache-Control": NO_STORE},
    )
