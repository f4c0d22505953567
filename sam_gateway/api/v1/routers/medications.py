"""Medication search and detail routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import (
    get_cache_policies,
    get_medication_detail_handler,
    get_search_medications_handler,
)
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.get_medication_detail import (
    GetMedicationDetailHandler,
    GetMedicationDetailQuery,
)
from sam_gateway.application.queries.search_medications import (
    SearchMedicationsHandler,
    SearchMedicationsQuery,
)
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_AMP

router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("")
async def search_medications(
    query: Optional[str] = Query(default=None),
    cnk: Optional[str] = Query(default=None),
    code: Optional[str] = Query(default=None),
    ingredient: Optional[str] = Query(default=None),
    vmp: Optional[str] = Query(default=None),
    company: Optional[str] = Query(default=None),
    lang: str = Query(default="en"),
    handler: SearchMedicationsHandler = Depends(get_search_medications_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(
        SearchMedicationsQuery(
            query=query,
            cnk=cnk,
            amp_code=code,
            ingredient=ingredient,
            vmp_code=vmp,
            company_actor_nr=company,
            language=lang,
        )
    )
    return result_response(result, policies[FIND_AMP.data_class])


@router.get("/{identifier}")
async def get_medication_detail(
    identifier: str,
    lang: str = Query(default="en"),
    reimbursement: bool = Query(default=True),
    equivalents: bool = Query(default=True),
    handler: GetMedicationDetailHandler = Depends(get_medication_detail_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    """Medication by CNK or AMP code, with reimbursement and equivalents unless turned off."""
    result = await handler.handle(
        GetMedicationDetailQuery(
            identifier=identifier,
            language=lang,
            include_reimbursement=reimbursement,
            include_equivalents=equivalents,
        )
    )
    return result_response(result, policies[FIND_AMP.data_class])
