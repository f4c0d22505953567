"""Query handler for medication (AMP) search."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler, pad_actor_nr
from sam_gateway.constants import COMPANY_ACTOR_NR_WIDTH
from sam_gateway.domain.entities.medication import MedicationSummary
from sam_gateway.infrastructure.mapping.medication_mapper import transform_medication_summary
from sam_gateway.infrastructure.soap.envelope_builder import FindAmpParams
from sam_gateway.infrastructure.soap.operations import FIND_AMP


@dataclass(frozen=True)
class SearchMedicationsQuery:
    """Search criteria; the first one set wins, a company filter narrows it."""

    query: Optional[str] = None
    cnk: Optional[str] = None
    amp_code: Optional[str] = None
    ingredient: Optional[str] = None
    vmp_code: Optional[str] = None
    company_actor_nr: Optional[str] = None
    language: str = "en"


class SearchMedicationsHandler(RegistryQueryHandler):
    operation = FIND_AMP.name

    async def handle(self, query: SearchMedicationsQuery) -> ApiResult[Tuple[MedicationSummary, ...]]:
        params = FindAmpParams(
            any_name_part=query.query,
            cnk=query.cnk,
            amp_code=query.amp_code,
            ingredient=query.ingredient,
            vmp_code=query.vmp_code,
            company_actor_nr=pad_actor_nr(query.company_actor_nr, COMPANY_ACTOR_NR_WIDTH),
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(
                transform_medication_summary(record, query.language) for record in parsed.records
            ),
        )
