"""Relay of PDF documents from the allow-listed upstream host.

Redirects are never followed, the content type must be the configured one
and the body is streamed against a hard size ceiling under one overall
timeout.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from sam_gateway.constants import PROXY_RESPONSE_HEADERS
from sam_gateway.domain.exceptions import (
    DocumentFetchError,
    DocumentFetchTimeout,
    DocumentTooLarge,
    NotAllowed,
    UnsupportedContentType,
)
from sam_gateway.infrastructure.proxy.url_policy import DocumentUrlPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxiedDocument:
    content: bytes
    headers: Dict[str, str] = field(default_factory=dict)


class DocumentProxy:
    def __init__(
        self,
        policy: DocumentUrlPolicy,
        max_bytes: int = 50 * 1024 * 1024,
        timeout: float = 30.0,
        content_type: str = "application/pdf",
        user_agent: str = "MedSearch/1.0",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.policy = policy
        self.max_bytes = max_bytes
        self.timeout = timeout
        self.content_type = content_type
        self.user_agent = user_agent
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), follow_redirects=False)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> ProxiedDocument:
        """Fetch ``url`` and return its bytes with the fixed response headers.

        Raises:
            NotAllowed: URL outside the allow-list or upstream redirect.
            UnsupportedContentType: Upstream media type is not allowed.
            DocumentTooLarge: Declared or streamed size above the ceiling.
            DocumentFetchTimeout: The whole fetch exceeded the timeout.
            DocumentFetchError: Any other upstream failure.
        """
        if not self.policy.is_allowed(url):
            logger.info("Rejected document URL", extra={"url": url})
            raise NotAllowed("URL not allowed")

        try:
            content = await asyncio.wait_for(self._download(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Document fetch timed out after %ss", self.timeout, extra={"url": url})
            raise DocumentFetchTimeout("Request timeout", cause=exc) from exc
        except httpx.RequestError as exc:
            logger.error("Document fetch failed: %s", exc, extra={"url": url})
            raise DocumentFetchError("Failed to fetch document", cause=exc) from exc

        headers = {"Content-Type": self.content_type}
        headers.update(PROXY_RESPONSE_HEADERS)
        return ProxiedDocument(content=content, headers=headers)

    async def _download(self, url: str) -> bytes:
        client = await self._get_client()
        async with client.stream(
            "GET",
            url,
            headers={"User-Agent": self.user_agent},
            follow_redirects=False,
        ) as response:
            if 300 <= response.status_code < 400:
                logger.info("Rejected upstream redirect", extra={"url": url, "status_code": response.status_code})
                raise NotAllowed("Redirects not allowed")
            if not response.is_success:
                logger.warning(
                    "Upstream returned HTTP %s",
                    response.status_code,
                    extra={"url": url, "status_code": response.status_code},
                )
                raise DocumentFetchError("Failed to fetch document")

            raw_content_type = response.headers.get("content-type", "")
            media_type = raw_content_type.split(";")[0].strip().lower()
            if media_type != self.content_type:
                logger.info("Rejected content type %s", raw_content_type, extra={"url": url})
                raise UnsupportedContentType(raw_content_type)

            declared = response.headers.get("content-length")
            if declared and declared.strip().isdigit() and int(declared) > self.max_bytes:
                logger.info("Rejected declared size %s", declared, extra={"url": url})
                raise DocumentTooLarge(self.max_bytes, int(declared))

            chunks: List[bytes] = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                if received > self.max_bytes:
                    logger.info("Rejected streamed size above %s bytes", self.max_bytes, extra={"url": url})
                    raise DocumentTooLarge(self.max_bytes, received)
                chunks.append(chunk)
            return b"".join(chunks)
