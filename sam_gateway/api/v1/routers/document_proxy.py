"""Hardened PDF relay route."""
from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from sam_gateway.api.schemas import ProxyErrorSchema
from sam_gateway.api.v1.dependencies import get_document_proxy, get_rate_limiter
from sam_gateway.domain.exceptions import DocumentProxyError, RateLimitExceeded
from sam_gateway.infrastructure.proxy.document_proxy import DocumentProxy
from sam_gateway.infrastructure.proxy.rate_limiter import RateLimiter, client_key_from_headers

router = APIRouter(prefix="/document-proxy", tags=["document-proxy"])


def _error(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body = ProxyErrorSchema(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@router.get("")
async def proxy_document(
    request: Request,
    url: Optional[str] = Query(default=None),
    proxy: DocumentProxy = Depends(get_document_proxy),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> Response:
    peer_host = request.client.host if request.client else None
    try:
        limiter.check(client_key_from_headers(request.headers, peer_host))
    except RateLimitExceeded as exc:
        return _error(exc.status_code, exc.message, headers={"Retry-After": str(exc.retry_after)})

    if not url:
        return _error(400, "Missing URL parameter")

    try:
        document = await proxy.fetch(url)
    except DocumentProxyError as exc:
        return _error(exc.status_code, exc.message)

    return Response(content=document.content, headers=document.headers)
