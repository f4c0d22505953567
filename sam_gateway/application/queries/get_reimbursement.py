"""Query handler for reimbursement contexts of a package."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.reimbursement import Reimbursement
from sam_gateway.infrastructure.mapping.reimbursement_mapper import transform_reimbursement
from sam_gateway.infrastructure.soap.envelope_builder import FindReimbursementParams
from sam_gateway.infrastructure.soap.operations import FIND_REIMBURSEMENT


@dataclass(frozen=True)
class GetReimbursementQuery:
    """Identify the package by CNK or by AMPP (CTI-extended) code."""

    cnk: Optional[str] = None
    ampp_code: Optional[str] = None
    language: str = "en"


class GetReimbursementHandler(RegistryQueryHandler):
    operation = FIND_REIMBURSEMENT.name

    async def handle(self, query: GetReimbursementQuery) -> ApiResult[Tuple[Reimbursement, ...]]:
        params = FindReimbursementParams(
            cnk=query.cnk,
            ampp_code=query.ampp_code,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_reimbursement(record) for record in parsed.records),
        )
