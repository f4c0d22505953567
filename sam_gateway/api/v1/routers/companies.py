"""Company routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_search_companies_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.search_companies import (
    SearchCompaniesHandler,
    SearchCompaniesQuery,
)
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_COMPANY

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("")
async def search_companies(
    query: Optional[str] = Query(default=None),
    actor_nr: Optional[str] = Query(default=None, alias="actorNr"),
    vat_nr: Optional[str] = Query(default=None, alias="vatNr"),
    lang: str = Query(default="en"),
    handler: SearchCompaniesHandler = Depends(get_search_companies_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(
        SearchCompaniesQuery(query=query, actor_nr=actor_nr, vat_nr=vat_nr, language=lang)
    )
    return result_response(result, policies[FIND_COMPANY.data_class])
