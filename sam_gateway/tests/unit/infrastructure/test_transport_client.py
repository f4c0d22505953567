from __future__ import annotations

import httpx
import pytest

from sam_gateway.domain.exceptions import TransportError, TransportTimeoutError
from sam_gateway.infrastructure.soap.transport_client import SamTransportClient

ENDPOINT = "https://registry.test/samv2/dics/v5"


def _transport_client(handler) -> SamTransportClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SamTransportClient(ENDPOINT, timeout=5.0, client=client)


@pytest.mark.asyncio
async def test_posts_envelope_and_returns_body() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content.decode("utf-8")
        return httpx.Response(200, text="<ok/>")

    transport = _transport_client(handler)

    assert await transport.send("<envelope/>", "FindAmp") == "<ok/>"
    assert seen == {
        "method": "POST",
        "url": ENDPOINT,
        "content_type": "text/xml; charset=utf-8",
        "body": "<envelope/>",
    }


@pytest.mark.asyncio
async def test_fault_in_error_status_is_returned() -> None:
    transport = _transport_client(lambda request: httpx.Response(500, text="<soap:Fault>x</soap:Fault>"))

    assert "Fault" in await transport.send("<envelope/>", "FindAmp")


@pytest.mark.asyncio
async def test_error_status_without_fault_raises() -> None:
    transport = _transport_client(lambda request: httpx.Response(503, text="Service Unavailable"))

    with pytest.raises(TransportError) as excinfo:
        await transport.send("<envelope/>", "FindAmp")

    assert excinfo.value.code == "REQUEST_FAILED"
    assert "503" in excinfo.value.message


@pytest.mark.asyncio
async def test_timeout_is_distinct() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    transport = _transport_client(handler)

    with pytest.raises(TransportTimeoutError) as excinfo:
        await transport.send("<envelope/>", "FindAmp")

    assert excinfo.value.code == "TIMEOUT"


@pytest.mark.asyncio
async def test_connection_error_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    transport = _transport_client(handler)

    with pytest.raises(TransportError) as excinfo:
        await transport.send("<envelope/>", "FindAmp")

    assert not isinstance(excinfo.value, TransportTimeoutError)
