"""
Query handler for a single medication with its surrounding context.

The product itself comes from FindAmp by CNK or AMP code. Reimbursement,
the generic product and other brands of the same generic are fetched
concurrently afterwards; any of them failing only leaves that part empty.
"""
from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TypeVar

from sam_gateway.application.dto.api_result import ApiResult, ResultMeta
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.constants import CNK_LENGTH
from sam_gateway.domain.entities.generic_product import GenericProduct
from sam_gateway.domain.entities.medication import Medication, MedicationSummary, sort_by_price
from sam_gateway.domain.entities.medication_detail import MedicationDetail
from sam_gateway.domain.entities.reimbursement import Reimbursement
from sam_gateway.domain.exceptions import InvalidParameterError, NotFoundError, SamGatewayError
from sam_gateway.infrastructure.mapping.medication_mapper import (
    transform_generic_product,
    transform_medication,
    transform_medication_summary,
)
from sam_gateway.infrastructure.mapping.reimbursement_mapper import transform_reimbursement
from sam_gateway.infrastructure.soap.envelope_builder import (
    CNK_PATTERN,
    FindAmpParams,
    FindReimbursementParams,
    FindVmpParams,
    SearchParams,
)
from sam_gateway.infrastructure.soap.operations import FIND_AMP, FIND_REIMBURSEMENT, FIND_VMP
from sam_gateway.infrastructure.soap.response_parser import ParsedResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

AMP_CODE_PATTERN = re.compile(r"SAM\d{6}-\d{2}", re.ASCII)


def normalize_medication_id(identifier: str) -> str:
    """
    Numeric identifiers are CNKs and are zero-padded to seven digits.

    Examples:
        >>> normalize_medication_id(" 12345 ")
        '0012345'
        >>> normalize_medication_id("SAM000001-00")
        'SAM000001-00'
    """
    stripped = identifier.strip()
    if re.fullmatch(r"\d{1,7}", stripped, re.ASCII):
        return stripped.rjust(CNK_LENGTH, "0")
    return stripped


@dataclass(frozen=True)
class GetMedicationDetailQuery:
    identifier: str
    language: str = "en"
    include_reimbursement: bool = True
    include_equivalents: bool = True


class GetMedicationDetailHandler(RegistryQueryHandler):
    operation = FIND_AMP.name

    async def handle(self, query: GetMedicationDetailQuery) -> ApiResult[MedicationDetail]:
        identifier = normalize_medication_id(query.identifier)
        try:
            params = self._lookup_params(identifier, query.language)
            parsed = await self._registry.execute(self.operation, params)
            medication = self._select(parsed, identifier, query.language)
        except SamGatewayError as exc:
            self._log_failure(exc)
            return ApiResult.from_exception(exc)

        reimbursements, generic_product, equivalents = await asyncio.gather(
            self._reimbursements(medication, query),
            self._generic_product(medication, query),
            self._equivalents(medication, query),
        )

        detail = MedicationDetail(
            medication=medication,
            reimbursements=reimbursements or (),
            generic_product=generic_product,
            equivalents=equivalents or (),
        )
        return ApiResult.ok(detail, meta=ResultMeta(search_date=parsed.search_date, sam_id=parsed.sam_id))

    @staticmethod
    def _lookup_params(identifier: str, language: str) -> FindAmpParams:
        if CNK_PATTERN.fullmatch(identifier):
            return FindAmpParams(cnk=identifier, language=language)
        if AMP_CODE_PATTERN.fullmatch(identifier):
            return FindAmpParams(amp_code=identifier, language=language)
        raise InvalidParameterError(
            "id",
            "ID must be a 7-digit CNK code or a SAM AMP code such as SAM123456-01",
        )

    @staticmethod
    def _select(parsed: ParsedResponse, identifier: str, language: str) -> Medication:
        medications = [transform_medication(record, language) for record in parsed.records]
        if not medications:
            raise NotFoundError("Medication", identifier)
        # A CNK search can return several products; prefer the one selling that CNK.
        for medication in medications:
            if any(cnk.code == identifier for package in medication.packages for cnk in package.cnk_codes):
                return medication
        return medications[0]

    async def _reimbursements(
        self,
        medication: Medication,
        query: GetMedicationDetailQuery,
    ) -> Optional[Tuple[Reimbursement, ...]]:
        cnk = medication.public_cnk()
        if not query.include_reimbursement or cnk is None:
            return None
        return await self._optional(
            FIND_REIMBURSEMENT.name,
            FindReimbursementParams(cnk=cnk, language=query.language),
            lambda parsed: tuple(transform_reimbursement(record) for record in parsed.records),
        )

    async def _generic_product(
        self,
        medication: Medication,
        query: GetMedicationDetailQuery,
    ) -> Optional[GenericProduct]:
        if not query.include_equivalents or not medication.vmp_code:
            return None
        return await self._optional(
            FIND_VMP.name,
            FindVmpParams(vmp_code=medication.vmp_code, language=query.language),
            lambda parsed: (
                transform_generic_product(parsed.records[0], query.language) if parsed.records else None
            ),
        )

    async def _equivalents(
        self,
        medication: Medication,
        query: GetMedicationDetailQuery,
    ) -> Optional[Tuple[MedicationSummary, ...]]:
        if not query.include_equivalents or not medication.vmp_code:
            return None

        def build(parsed: ParsedResponse) -> Tuple[MedicationSummary, ...]:
            others: List[MedicationSummary] = [
                transform_medication_summary(record, query.language) for record in parsed.records
            ]
            others = [item for item in others if item.amp_code != medication.amp_code]
            return tuple(sort_by_price(others))

        return await self._optional(
            FIND_AMP.name,
            FindAmpParams(vmp_code=medication.vmp_code, language=query.language),
            build,
        )

    async def _optional(
        self,
        operation: str,
        params: SearchParams,
        build: Callable[[ParsedResponse], Optional[T]],
    ) -> Optional[T]:
        try:
            return build(await self._registry.execute(operation, params))
        except SamGatewayError as exc:
            logger.warning(
                "%s lookup for medication detail failed: %s",
                operation,
                exc.message,
                extra={"operation": operation, "error_code": exc.code},
            )
            return None
