"""ATC classification routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_search_atc_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.search_atc import SearchAtcHandler, SearchAtcQuery
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_COMMENTED_CLASSIFICATION

router = APIRouter(prefix="/atc", tags=["atc"])


@router.get("")
async def search_atc(
    code: Optional[str] = Query(default=None),
    query: Optional[str] = Query(default=None),
    lang: str = Query(default="en"),
    handler: SearchAtcHandler = Depends(get_search_atc_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(SearchAtcQuery(code=code, query=query, language=lang))
    return result_response(result, policies[FIND_COMMENTED_CLASSIFICATION.data_class])
