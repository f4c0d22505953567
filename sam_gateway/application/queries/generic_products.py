"""Query handlers for generic products (VMPs)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.generic_product import GenericProduct
from sam_gateway.domain.exceptions import NotFoundError
from sam_gateway.infrastructure.mapping.medication_mapper import transform_generic_product
from sam_gateway.infrastructure.soap.envelope_builder import FindVmpParams
from sam_gateway.infrastructure.soap.operations import FIND_VMP
from sam_gateway.infrastructure.soap.response_parser import ParsedResponse


@dataclass(frozen=True)
class SearchGenericProductsQuery:
    query: Optional[str] = None
    vmp_code: Optional[str] = None
    ingredient: Optional[str] = None
    vtm_code: Optional[str] = None
    vmp_group_code: Optional[str] = None
    language: str = "en"


@dataclass(frozen=True)
class GetGenericProductQuery:
    vmp_code: str
    language: str = "en"


class SearchGenericProductsHandler(RegistryQueryHandler):
    operation = FIND_VMP.name

    async def handle(self, query: SearchGenericProductsQuery) -> ApiResult[Tuple[GenericProduct, ...]]:
        params = FindVmpParams(
            vmp_group_code=query.vmp_group_code,
            any_name_part=query.query,
            vmp_code=query.vmp_code,
            vtm_code=query.vtm_code,
            ingredient=query.ingredient,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_generic_product(record, query.language) for record in parsed.records),
        )


class GetGenericProductHandler(RegistryQueryHandler):
    """Single generic product by VMP code; an empty answer is ``NOT_FOUND``."""

    operation = FIND_VMP.name

    async def handle(self, query: GetGenericProductQuery) -> ApiResult[GenericProduct]:
        params = FindVmpParams(vmp_code=query.vmp_code, language=query.language)

        def build(parsed: ParsedResponse) -> GenericProduct:
            if not parsed.records:
                raise NotFoundError("GenericProduct", query.vmp_code)
            return transform_generic_product(parsed.records[0], query.language)

        return await self._run(params, build, count=None)
