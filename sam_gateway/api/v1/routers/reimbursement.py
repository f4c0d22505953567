"""Reimbursement routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_reimbursement_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.get_reimbursement import (
    GetReimbursementHandler,
    GetReimbursementQuery,
)
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_REIMBURSEMENT

router = APIRouter(prefix="/reimbursement", tags=["reimbursement"])


@router.get("")
async def get_reimbursement(
    cnk: Optional[str] = Query(default=None),
    ampp: Optional[str] = Query(default=None),
    lang: str = Query(default="en"),
    handler: GetReimbursementHandler = Depends(get_reimbursement_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(GetReimbursementQuery(cnk=cnk, ampp_code=ampp, language=lang))
    return result_response(result, policies[FIND_REIMBURSEMENT.data_class])
