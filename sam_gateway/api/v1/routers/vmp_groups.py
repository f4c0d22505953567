"""Generic prescription group routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_vmp_groups_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.get_vmp_groups import GetVmpGroupsHandler, GetVmpGroupsQuery
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_VMP_GROUP

router = APIRouter(prefix="/vmp-groups", tags=["vmp-groups"])


@router.get("")
async def get_vmp_groups(
    code: Optional[str] = Query(default=None),
    query: Optional[str] = Query(default=None),
    lang: str = Query(default="en"),
    handler: GetVmpGroupsHandler = Depends(get_vmp_groups_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(GetVmpGroupsQuery(code=code, query=query, language=lang))
    return result_response(result, policies[FIND_VMP_GROUP.data_class])
