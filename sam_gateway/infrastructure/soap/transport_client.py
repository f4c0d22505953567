"""Async HTTP transport for registry SOAP calls."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from sam_gateway.domain.exceptions import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)

SOAP_HEADERS = {
    "Content-Type": "text/xml; charset=utf-8",
    "Accept": "text/xml",
    "SOAPAction": "",
}


class SamTransportClient:
    """POSTs SOAP envelopes to the registry endpoint.

    One call, one attempt: there are no retries. A non-2xx answer whose body
    is a SOAP fault is returned so the parser can classify the fault; any
    other non-2xx answer is a ``TransportError``.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.user_agent = user_agent
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = dict(SOAP_HEADERS)
            if self.user_agent:
                headers["User-Agent"] = self.user_agent
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), headers=headers)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def send(self, envelope: str, operation: str) -> str:
        """Send ``envelope`` and return the response body text.

        Raises:
            TransportTimeoutError: The call exceeded the configured timeout.
            TransportError: Connection failure or non-2xx without a fault.
        """
        client = await self._get_client()
        try:
            response = await client.post(
                self.endpoint,
                content=envelope.encode("utf-8"),
                headers=SOAP_HEADERS,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.error("Timeout calling %s after %ss", operation, self.timeout, extra={"operation": operation})
            raise TransportTimeoutError(f"{operation} timed out after {self.timeout}s", cause=exc) from exc
        except httpx.RequestError as exc:
            logger.error("Request error calling %s: %s", operation, exc, extra={"operation": operation})
            raise TransportError(f"{operation} request failed: {exc}", cause=exc) from exc

        if response.is_success:
            return response.text

        body = response.text
        if "Fault" in body:
            logger.warning(
                "HTTP %s with SOAP fault from %s",
                response.status_code,
                operation,
                extra={"operation": operation, "status_code": response.status_code},
            )
            return body

        logger.error(
            "HTTP error calling %s: %s",
            operation,
            response.status_code,
            extra={"operation": operation, "status_code": response.status_code},
        )
        raise TransportError(f"{operation} failed with HTTP {response.status_code}")
