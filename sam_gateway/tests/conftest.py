"""Shared pytest fixtures for sam_gateway tests."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict

import pytest

from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures" / "soap"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def load_soap_fixture() -> Callable[[str], str]:
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fixed_issue_time() -> Callable[[], datetime]:
    return lambda: datetime(2026, 10, 19, 8, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.fixture()
def cache_policies() -> Dict[DataClass, CachePolicy]:
    return {
        DataClass.VOLATILE_CLINICAL: CachePolicy(revalidate_seconds=60, client_stale_seconds=30),
        DataClass.CORE_REFERENCE_DATA: CachePolicy(revalidate_seconds=600, client_stale_seconds=300),
        DataClass.STATIC_REFERENCE_DATA: CachePolicy(
            revalidate_seconds=3600,
            client_stale_seconds=600,
            stale_while_revalidate_seconds=7200,
        ),
    }
