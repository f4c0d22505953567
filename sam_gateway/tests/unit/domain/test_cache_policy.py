from __future__ import annotations

import pytest

from sam_gateway.domain.value_objects import CachePolicy


def test_freshness_window() -> None:
    policy = CachePolicy(revalidate_seconds=60, client_stale_seconds=30)

    assert policy.is_fresh(0)
    assert policy.is_fresh(59.9)
    assert not policy.is_fresh(60)


def test_cache_control_header() -> None:
    policy = CachePolicy(revalidate_seconds=86400, client_stale_seconds=300, stale_while_revalidate_seconds=3600)

    assert policy.cache_control_header() == "public, max-age=300, s-maxage=86400, stale-while-revalidate=3600"
    assert CachePolicy(60, 30).cache_control_header(public=False) == "max-age=30, s-maxage=60"


def test_rejects_negative_durations() -> None:
    with pytest.raises(ValueError):
        CachePolicy(revalidate_seconds=-1, client_stale_seconds=0)


def test_client_window_cannot_exceed_server_window() -> None:
    with pytest.raises(ValueError):
        CachePolicy(revalidate_seconds=60, client_stale_seconds=120)
