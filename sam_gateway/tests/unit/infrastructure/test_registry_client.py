from __future__ import annotations

import httpx
import pytest

from sam_gateway.domain.exceptions import InvalidParameterError, TransportError, UpstreamFaultError
from sam_gateway.domain.value_objects import DataClass
from sam_gateway.infrastructure.cache import ResponseCache
from sam_gateway.infrastructure.soap import SamRegistryClient, SamTransportClient
from sam_gateway.infrastructure.soap.envelope_builder import FindAmpParams, FindCommentedClassificationParams


class RecordingHandler:
    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def _registry(handler, cache_policies, fake_clock, cache=None) -> SamRegistryClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = SamTransportClient("https://registry.test/dics", client=client)
    cache = cache if cache is not None else ResponseCache(cache_policies, sweep_probability=0, clock=fake_clock)
    return SamRegistryClient(transport, cache)


@pytest.mark.asyncio
async def test_equal_requests_hit_upstream_once(load_soap_fixture, cache_policies, fake_clock) -> None:
    handler = RecordingHandler(httpx.Response(200, text=load_soap_fixture("find_amp.xml")))
    registry = _registry(handler, cache_policies, fake_clock)

    first = await registry.execute("FindAmp", FindAmpParams(cnk="0012345", language="en"))
    second = await registry.execute("FindAmp", FindAmpParams(cnk=" 0012345", language="nl"))

    assert len(handler.requests) == 1
    assert first.records[0].attribute("Code") == "SAM000001-00"
    assert second.records[0].attribute("Code") == "SAM000001-00"


@pytest.mark.asyncio
async def test_cache_stores_response_text_and_parses_per_call(
    load_soap_fixture, cache_policies, fake_clock
) -> None:
    xml_text = load_soap_fixture("find_amp.xml")
    handler = RecordingHandler(httpx.Response(200, text=xml_text))
    cache = ResponseCache(cache_policies, sweep_probability=0, clock=fake_clock)
    registry = _registry(handler, cache_policies, fake_clock, cache=cache)

    first = await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))
    second = await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))

    entries = list(cache._entries.values())
    assert len(entries) == 1
    assert all(isinstance(entry.response, str) for entry in entries)
    assert entries[0].response == xml_text
    assert first is not second
    assert first.records[0] is not second.records[0]
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_fault_response_is_not_cached(load_soap_fixture, cache_policies, fake_clock) -> None:
    handler = RecordingHandler(httpx.Response(200, text=load_soap_fixture("business_fault_error.xml")))
    cache = ResponseCache(cache_policies, sweep_probability=0, clock=fake_clock)
    registry = _registry(handler, cache_policies, fake_clock, cache=cache)

    with pytest.raises(UpstreamFaultError):
        await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_refetches_after_revalidate_interval(load_soap_fixture, cache_policies, fake_clock) -> None:
    handler = RecordingHandler(httpx.Response(200, text=load_soap_fixture("find_amp.xml")))
    registry = _registry(handler, cache_policies, fake_clock)

    await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))
    fake_clock.advance(cache_policies[DataClass.VOLATILE_CLINICAL].revalidate_seconds)
    await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))

    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_invalid_parameters_never_reach_upstream(cache_policies, fake_clock) -> None:
    handler = RecordingHandler(httpx.Response(200, text=""))
    registry = _registry(handler, cache_policies, fake_clock)

    with pytest.raises(InvalidParameterError):
        await registry.execute("FindCommentedClassification", FindCommentedClassificationParams(language="es"))

    assert handler.requests == []


@pytest.mark.asyncio
async def test_transport_failure_is_not_cached(load_soap_fixture, cache_policies, fake_clock) -> None:
    handler = RecordingHandler(httpx.Response(502, text="Bad Gateway"))
    registry = _registry(handler, cache_policies, fake_clock)

    with pytest.raises(TransportError):
        await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))

    handler.response = httpx.Response(200, text=load_soap_fixture("find_amp.xml"))
    parsed = await registry.execute("FindAmp", FindAmpParams(cnk="0012345"))

    assert len(parsed.records) == 1
    assert len(handler.requests) == 2


def test_cache_policy_lookup(cache_policies, fake_clock) -> None:
    registry = _registry(RecordingHandler(httpx.Response(200)), cache_policies, fake_clock)

    assert registry.cache_policy("FindCommentedClassification") == cache_policies[DataClass.STATIC_REFERENCE_DATA]
