"""Chapter IV paragraph routes."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from sam_gateway.api.v1.dependencies import get_cache_policies, get_chapter_iv_handler
from sam_gateway.api.v1.responses import result_response
from sam_gateway.application.queries.get_chapter_iv import GetChapterIVHandler, GetChapterIVQuery
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.soap.operations import FIND_CHAPTER_IV_PARAGRAPH

router = APIRouter(prefix="/chapter-iv", tags=["chapter-iv"])


@router.get("")
async def get_chapter_iv(
    cnk: Optional[str] = Query(default=None),
    chapter: Optional[str] = Query(default=None),
    paragraph: Optional[str] = Query(default=None),
    legal_reference_path: Optional[str] = Query(default=None, alias="legalReferencePath"),
    lang: str = Query(default="en"),
    handler: GetChapterIVHandler = Depends(get_chapter_iv_handler),
    policies: Dict[DataClass, CachePolicy] = Depends(get_cache_policies),
) -> JSONResponse:
    result = await handler.handle(
        GetChapterIVQuery(
            cnk=cnk,
            chapter_name=chapter,
            paragraph_name=paragraph,
            legal_reference_path=legal_reference_path,
            language=lang,
        )
    )
    return result_response(result, policies[FIND_CHAPTER_IV_PARAGRAPH.data_class])
