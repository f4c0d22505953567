"""Standard dosage routes."""
from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_standard_dosages_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.get_standard_dosages import (
    GetStandardDosagesHandler,
    GetStandardDosagesQuery,
)
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_STANDARD_DOSAGE

router = APIRouter(prefix="/dosages", tags=["dosages"])


@router.get("/{vmp_group_code}")
async def get_standard_dosages(
    vmp_group_code: str,
    lang: str = Query(default="en"),
    handler: GetStandardDosagesHandler = Depends(get_standard_dosages_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(
        GetStandardDosagesQuery(vmp_group_code=vmp_group_code, language=lang)
    )
    return result_response(result, policies[FIND_STANDARD_DOSAGE.data_class])
