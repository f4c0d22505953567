"""Legislation routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_legislation_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.get_legislation import GetLegislationHandler, GetLegislationQuery
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_LEGISLATION_TEXT

router = APIRouter(prefix="/legislation", tags=["legislation"])


@router.get("")
async def get_legislation(
    cnk: Optional[str] = Query(default=None),
    path: Optional[str] = Query(default=None),
    lang: str = Query(default="en"),
    handler: GetLegislationHandler = Depends(get_legislation_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    """Legal bases for a CNK or a legal reference path; legal texts exist in fr, nl and de only."""
    result = await handler.handle(GetLegislationQuery(cnk=cnk, legal_reference_path=path, language=lang))
    return result_response(result, policies[FIND_LEGISLATION_TEXT.data_class])


@router.get("/legal-bases")
async def list_legal_bases(
    lang: str = Query(default="en"),
    handler: GetLegislationHandler = Depends(get_legislation_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(GetLegislationQuery(all_legal_bases=True, language=lang))
    return result_response(result, policies[FIND_LEGISLATION_TEXT.data_class])
