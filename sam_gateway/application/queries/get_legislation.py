"""Query handler for the legislation behind reimbursement rules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.legislation import LegalBasis
from sam_gateway.infrastructure.mapping.legislation_mapper import transform_legal_basis
from sam_gateway.infrastructure.soap.envelope_builder import FindLegislationTextParams
from sam_gateway.infrastructure.soap.operations import FIND_LEGISLATION_TEXT


@dataclass(frozen=True)
class GetLegislationQuery:
    """By CNK or legal reference path; ``all_legal_bases`` lists every Royal Decree."""

    cnk: Optional[str] = None
    legal_reference_path: Optional[str] = None
    all_legal_bases: bool = False
    language: str = "en"


class GetLegislationHandler(RegistryQueryHandler):
    operation = FIND_LEGISLATION_TEXT.name

    async def handle(self, query: GetLegislationQuery) -> ApiResult[Tuple[LegalBasis, ...]]:
        params = FindLegislationTextParams(
            cnk=query.cnk,
            legal_reference_path=query.legal_reference_path,
            all_legal_bases=query.all_legal_bases,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_legal_basis(record) for record in parsed.records),
        )
