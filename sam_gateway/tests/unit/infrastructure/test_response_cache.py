from __future__ import annotations

import pytest

from sam_gateway.domain.exceptions import TransportError
from sam_gateway.domain.value_objects import DataClass
from sam_gateway.infrastructure.cache import ResponseCache, normalize_cache_key
from sam_gateway.infrastructure.soap.envelope_builder import FindAmpParams


class CountingFetch:
    def __init__(self, result="response") -> None:
        self.calls = 0
        self.result = result

    async def __call__(self):
        self.calls += 1
        return f"{self.result}-{self.calls}"


@pytest.fixture()
def cache(cache_policies, fake_clock) -> ResponseCache:
    return ResponseCache(cache_policies, sweep_probability=0, clock=fake_clock)


def test_key_ignores_order_blanks_and_language() -> None:
    first = normalize_cache_key("FindAmp", FindAmpParams(cnk=" 0012345 ", language="en"))
    second = normalize_cache_key("FindAmp", FindAmpParams(cnk="0012345", any_name_part="  ", language="fr"))

    assert first == second == 'FindAmp:{"cnk":"0012345"}'
    assert normalize_cache_key("FindAmp", {"b": 1, "a": 2}) == normalize_cache_key("FindAmp", {"a": 2, "b": 1})
    assert normalize_cache_key("FindAmp", None) == "FindAmp:{}"


def test_key_differs_per_operation() -> None:
    params = {"code": "A01"}

    assert normalize_cache_key("FindAmp", params) != normalize_cache_key("FindVmpGroup", params)


@pytest.mark.asyncio
async def test_second_call_within_window_is_served_from_cache(cache: ResponseCache, fake_clock) -> None:
    fetch = CountingFetch()

    first = await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)
    fake_clock.advance(59)
    second = await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)

    assert first == second == "response-1"
    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_entry_expires_after_revalidate_interval(cache: ResponseCache, fake_clock) -> None:
    fetch = CountingFetch()

    await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)
    fake_clock.advance(60)
    result = await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)

    assert result == "response-2"
    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_data_class_sets_the_window(cache: ResponseCache, fake_clock) -> None:
    fetch = CountingFetch()

    await cache.get_or_fetch("FindCommentedClassification", {"code": "A"}, DataClass.STATIC_REFERENCE_DATA, fetch)
    fake_clock.advance(3599)
    await cache.get_or_fetch("FindCommentedClassification", {"code": "A"}, DataClass.STATIC_REFERENCE_DATA, fetch)

    assert fetch.calls == 1


@pytest.mark.asyncio
async def test_failures_are_not_cached(cache: ResponseCache) -> None:
    async def failing():
        raise TransportError("down")

    with pytest.raises(TransportError):
        await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, failing)

    assert len(cache) == 0

    fetch = CountingFetch()
    assert await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch) == "response-1"


@pytest.mark.asyncio
async def test_capacity_evicts_oldest_entry(cache_policies, fake_clock) -> None:
    cache = ResponseCache(cache_policies, max_entries=2, sweep_probability=0, clock=fake_clock)
    fetch = CountingFetch()

    for cnk in ("1", "2", "3"):
        await cache.get_or_fetch("FindAmp", {"cnk": cnk}, DataClass.VOLATILE_CLINICAL, fetch)

    assert len(cache) == 2
    await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)
    assert fetch.calls == 4


@pytest.mark.asyncio
async def test_sweep_removes_expired_entries(cache_policies, fake_clock) -> None:
    cache = ResponseCache(cache_policies, sweep_probability=0.5, clock=fake_clock, random_source=lambda: 0.9)
    fetch = CountingFetch()

    await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)
    await cache.get_or_fetch("FindVmpGroup", {"code": "1"}, DataClass.CORE_REFERENCE_DATA, fetch)
    fake_clock.advance(120)

    assert cache.sweep() == 1
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_probabilistic_sweep_runs_on_access(cache_policies, fake_clock) -> None:
    cache = ResponseCache(cache_policies, sweep_probability=0.5, clock=fake_clock, random_source=lambda: 0.1)
    fetch = CountingFetch()

    await cache.get_or_fetch("FindAmp", {"cnk": "1"}, DataClass.VOLATILE_CLINICAL, fetch)
    fake_clock.advance(120)
    await cache.get_or_fetch("FindVmpGroup", {"code": "1"}, DataClass.CORE_REFERENCE_DATA, fetch)

    assert len(cache) == 1
