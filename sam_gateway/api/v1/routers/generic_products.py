"""Generic product (VMP) routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import (
    get_cache_policies,
    get_generic_product_handler,
    get_search_generic_products_handler,
)
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.generic_products import (
    GetGenericProductHandler,
    GetGenericProductQuery,
    SearchGenericProductsHandler,
    SearchGenericProductsQuery,
)
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_VMP

router = APIRouter(prefix="/generic-products", tags=["generic-products"])


@router.get("")
async def search_generic_products(
    query: Optional[str] = Query(default=None),
    code: Optional[str] = Query(default=None),
    ingredient: Optional[str] = Query(default=None),
    vtm: Optional[str] = Query(default=None),
    group: Optional[str] = Query(default=None),
    lang: str = Query(default="en"),
    handler: SearchGenericProductsHandler = Depends(get_search_generic_products_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(
        SearchGenericProductsQuery(
            query=query,
            vmp_code=code,
            ingredient=ingredient,
            vtm_code=vtm,
            vmp_group_code=group,
            language=lang,
        )
    )
    return result_response(result, policies[FIND_VMP.data_class])


@router.get("/{vmp_code}")
async def get_generic_product(
    vmp_code: str,
    lang: str = Query(default="en"),
    handler: GetGenericProductHandler = Depends(get_generic_product_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(GetGenericProductQuery(vmp_code=vmp_code, language=lang))
    return result_response(result, policies[FIND_VMP.data_class])
