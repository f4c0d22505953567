from __future__ import annotations

import pytest

from sam_gateway.application.dto.api_result import ApiError, ApiResult, ResultMeta
from sam_gateway.domain.entities import Company
from sam_gateway.domain.exceptions import TransportTimeoutError


def test_success_serialises_entities_and_meta() -> None:
    result = ApiResult.ok(
        (Company(actor_nr="01995", name="UCB Pharma"),),
        meta=ResultMeta(search_date="2026-10-19", sam_id="SAM-1", total_results=1),
    )

    payload = result.to_dict()

    assert payload["success"] is True
    assert payload["data"][0]["actorNr"] == "01995"
    assert payload["meta"] == {"searchDate": "2026-10-19", "samId": "SAM-1", "totalResults": 1}
    assert "error" not in payload


def test_empty_list_is_a_success() -> None:
    assert ApiResult.ok(()).to_dict() == {"success": True, "data": []}


def test_failure_from_exception() -> None:
    result = ApiResult.from_exception(TransportTimeoutError("FindAmp timed out"))

    assert result.success is False
    assert result.error == ApiError(code="TIMEOUT", message="FindAmp timed out")
    assert result.to_dict() == {"success": False, "error": {"code": "TIMEOUT", "message": "FindAmp timed out"}}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"success": True},
        {"success": False},
        {"success": True, "data": [], "error": ApiError("X", "x")},
        {"success": False, "data": [], "error": ApiError("X", "x")},
    ],
)
def test_inconsistent_results_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        ApiResult(**kwargs)
