"""Query handler for generic prescription groups."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.medication import VmpGroup
from sam_gateway.infrastructure.mapping.medication_mapper import transform_vmp_group
from sam_gateway.infrastructure.soap.envelope_builder import FindVmpGroupParams
from sam_gateway.infrastructure.soap.operations import FIND_VMP_GROUP


@dataclass(frozen=True)
class GetVmpGroupsQuery:
    code: Optional[str] = None
    query: Optional[str] = None
    language: str = "en"


class GetVmpGroupsHandler(RegistryQueryHandler):
    operation = FIND_VMP_GROUP.name

    async def handle(self, query: GetVmpGroupsQuery) -> ApiResult[Tuple[VmpGroup, ...]]:
        params = FindVmpGroupParams(
            vmp_group_code=query.code,
            any_name_part=query.query,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_vmp_group(record, query.language) for record in parsed.records),
        )
