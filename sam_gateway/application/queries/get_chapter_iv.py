"""Query handler for Chapter IV (prior authorisation) paragraphs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sam_gateway.application.dto.api_result import ApiResult
from sam_gateway.application.queries.registry_query import RegistryQueryHandler
from sam_gateway.domain.entities.chapter_iv import ChapterIVParagraph
from sam_gateway.infrastructure.mapping.chapter_iv_mapper import transform_chapter_iv_paragraph
from sam_gateway.infrastructure.soap.envelope_builder import FindChapterIVParams
from sam_gateway.infrastructure.soap.operations import FIND_CHAPTER_IV_PARAGRAPH


@dataclass(frozen=True)
class GetChapterIVQuery:
    """By CNK, by chapter and paragraph name, or by legal reference path."""

    cnk: Optional[str] = None
    chapter_name: Optional[str] = None
    paragraph_name: Optional[str] = None
    legal_reference_path: Optional[str] = None
    language: str = "en"


class GetChapterIVHandler(RegistryQueryHandler):
    operation = FIND_CHAPTER_IV_PARAGRAPH.name

    async def handle(self, query: GetChapterIVQuery) -> ApiResult[Tuple[ChapterIVParagraph, ...]]:
        params = FindChapterIVParams(
            cnk=query.cnk,
            chapter_name=query.chapter_name,
            paragraph_name=query.paragraph_name,
            legal_reference_path=query.legal_reference_path,
            language=query.language,
        )
        return await self._run(
            params,
            lambda parsed: tuple(transform_chapter_iv_paragraph(record) for record in parsed.records),
        )
