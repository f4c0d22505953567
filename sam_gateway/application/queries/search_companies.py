"""Query handler for pharmaceutical company lookup."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler, pad_actor_nr
from sam_gateway.constants import COMPANY_ACTOR_NR_WIDTH
from sam_gateway.domain.entities.company import Company
from sam_gateway.infrastructure.mapping.company_mapper import transform_company
from sam_gateway.infrastructure.soap.envelope_builder import FindCompanyParams
from sam_gateway.infrastructure.soap.operations import FIND_COMPANY


@dataclass(frozen=True)
class SearchCompaniesQuery:
    query: Optional[str] = None
    actor_nr: Optional[str] = None
    vat_nr: Optional[str] = None
    language: str = "en"


class SearchCompaniesHandler(RegistryQueryHandler):
    operation = FIND_COMPANY.name

    async def handle(self, query: SearchCompaniesQuery) -> ApiResult[Tuple[Company, ...]]:
        params = FindCompanyParams(
            company_actor_nr=pad_actor_nr(query.actor_nr, COMPANY_ACTOR_NR_WIDTH),
            any_name_part=query.query,
            vat_nr=query.vat_nr,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_company(record) for record in parsed.records),
        )
