"""Query handler for standard dosage recommendations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.standard_dosage import StandardDosage
from sam_gateway.infrastructure.mapping.dosage_mapper import transform_standard_dosage
from sam_gateway.infrastructure.soap.envelope_builder import FindStandardDosageParams
from sam_gateway.infrastructure.soap.operations import FIND_STANDARD_DOSAGE


@dataclass(frozen=True)
class GetStandardDosagesQuery:
    vmp_group_code: Optional[str] = None
    query: Optional[str] = None
    language: str = "en"


class GetStandardDosagesHandler(RegistryQueryHandler):
    operation = FIND_STANDARD_DOSAGE.name

    async def handle(self, query: GetStandardDosagesQuery) -> ApiResult[Tuple[StandardDosage, ...]]:
        params = FindStandardDosageParams(
            vmp_group_code=query.vmp_group_code,
            any_name_part=query.query,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_standard_dosage(record) for record in parsed.records),
        )
