"""Query handler for ATC classification browsing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.atc_classification import (
    AtcClassification,
    AtcSearchResult,
    classification_level,
)
from sam_gateway.infrastructure.mapping.atc_mapper import transform_atc_classification
from sam_gateway.infrastructure.soap.envelope_builder import FindCommentedClassificationParams
from sam_gateway.infrastructure.soap.operations import FIND_COMMENTED_CLASSIFICATION
from sam_gateway.infrastructure.soap.response_parser import ParsedResponse


@dataclass(frozen=True)
class SearchAtcQuery:
    """Look up a classification by code or search by name part."""

    code: Optional[str] = None
    query: Optional[str] = None
    language: str = "en"


class SearchAtcHandler(RegistryQueryHandler):
    """With a code: that classification plus its direct children.
    Without one: the top-level entries among the matches."""

    operation = FIND_COMMENTED_CLASSIFICATION.name

    async def handle(self, query: SearchAtcQuery) -> ApiResult[AtcSearchResult]:
        code = query.code.strip().upper() if query.code else None
        params = FindCommentedClassificationParams(
            code=code,
            any_name_part=query.query,
            language=query.language,
        )

        def build(parsed: ParsedResponse) -> AtcSearchResult:
            classifications = [
                transform_atc_classification(record, query.language) for record in parsed.records
            ]
            if code:
                return self._with_children(code, classifications)
            return AtcSearchResult(
                classifications=tuple(item for item in classifications if item.level == 1),
            )

        return await self._run(params, build, count=lambda result: len(result.classifications))

    @staticmethod
    def _with_children(code: str, classifications: List[AtcClassification]) -> AtcSearchResult:
        requested = next((item for item in classifications if item.code == code), None)
        child_level = classification_level(code) + 1
        children = tuple(
            item
            for item in classifications
            if item.parent_code == code and item.level == child_level
        )
        return AtcSearchResult(
            classifications=(requested,) if requested else (),
            children=children,
        )
