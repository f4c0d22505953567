"""Route-level tests for the v1 API with stubbed handlers and proxy."""
from __future__ import annotations

from typing import Any, List

import httpx
import pytest
from fastapi.testclient import TestClient

from sam_gateway.api.schemas import ProxyErrorSchema
from sam_gateway.api.v1 import dependencies
from sam_gateway.application.dto.api_result import ApiResult, ResultMeta
from sam_gateway.domain.entities import (
    AtcClassification,
    AtcSearchResult,
    Company,
    GenericProduct,
    LegalBasis,
    Medication,
    MedicationDetail,
)
from sam_gateway.domain.exceptions import NotFoundError
from sam_gateway.domain.value_objects import CachePolicy, DataClass
from sam_gateway.infrastructure.proxy import DocumentProxy, DocumentUrlPolicy, RateLimiter
from sam_gateway.main import app

DOCUMENT_URL = "https://app.fagg-afmps.be/pharma-status/api/files/12345"

POLICIES = {
    DataClass.VOLATILE_CLINICAL: CachePolicy(revalidate_seconds=21600, client_stale_seconds=300),
    DataClass.CORE_REFERENCE_DATA: CachePolicy(revalidate_seconds=86400, client_stale_seconds=86400),
    DataClass.STATIC_REFERENCE_DATA: CachePolicy(
        revalidate_seconds=604800,
        client_stale_seconds=86400,
        stale_while_revalidate_seconds=604800,
    ),
}


class StubHandler:
    def __init__(self, result: ApiResult[Any]) -> None:
        self.result = result
        self.queries: List[Any] = []

    async def handle(self, query):
        self.queries.append(query)
        return self.result


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    """Ensure dependency overrides do not leak between tests."""
    app.dependency_overrides = {dependencies.get_cache_policies: lambda: POLICIES}
    yield
    app.dependency_overrides = {}


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def _override(getter, result: ApiResult[Any]) -> StubHandler:
    handler = StubHandler(result)
    app.dependency_overrides[getter] = lambda: handler
    return handler


def test_atc_success_carries_cache_headers(client: TestClient) -> None:
    classification = AtcClassification(code="A01AA01", name="Sodium fluoride", level=5, parent_code="A01AA")
    handler = _override(
        dependencies.get_search_atc_handler,
        ApiResult.ok(AtcSearchResult(classifications=(classification,)), meta=ResultMeta(search_date="2026-10-19")),
    )

    response = client.get("/api/atc", params={"code": "A01AA01", "lang": "de"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["classifications"][0]["parentCode"] == "A01AA"
    assert payload["meta"]["searchDate"] == "2026-10-19"
    assert response.headers["cache-control"] == (
        "public, max-age=86400, s-maxage=604800, stale-while-revalidate=604800"
    )
    assert handler.queries[0].code == "A01AA01"
    assert handler.queries[0].language == "de"


def test_empty_result_is_a_success(client: TestClient) -> None:
    _override(dependencies.get_reimbursement_handler, ApiResult.ok(()))

    response = client.get("/api/reimbursement", params={"cnk": "0012345"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": []}
    assert response.headers["cache-control"] == "public, max-age=86400, s-maxage=86400"


@pytest.mark.parametrize(
    "code, status",
    [("INVALID_PARAMETER", 400), ("TIMEOUT", 504), ("SOAP_FAULT", 502), ("INCOMPLETE_RECORD", 502)],
)
def test_failure_status_mapping(client: TestClient, code: str, status: int) -> None:
    _override(dependencies.get_search_medications_handler, ApiResult.failure(code, "failed"))

    response = client.get("/api/medications", params={"query": "para"})

    assert response.status_code == status
    assert response.json() == {"success": False, "error": {"code": code, "message": "failed"}}
    assert response.headers["cache-control"] == "no-store"


def test_companies_query_parameters(client: TestClient) -> None:
    handler = _override(
        dependencies.get_search_companies_handler,
        ApiResult.ok((Company(actor_nr="01995", name="UCB Pharma"),)),
    )

    response = client.get("/api/companies", params={"actorNr": "1995", "lang": "fr"})

    assert response.status_code == 200
    assert response.json()["data"][0]["actorNr"] == "01995"
    assert handler.queries[0].actor_nr == "1995"
    assert handler.queries[0].language == "fr"


def test_dosages_path_parameter(client: TestClient) -> None:
    handler = _override(dependencies.get_standard_dosages_handler, ApiResult.ok(()))

    client.get("/api/dosages/24901")

    assert handler.queries[0].vmp_group_code == "24901"


def test_vmp_groups_and_chapter_iv_routes(client: TestClient) -> None:
    groups = _override(dependencies.get_vmp_groups_handler, ApiResult.ok(()))
    chapter = _override(dependencies.get_chapter_iv_handler, ApiResult.ok(()))

    assert client.get("/api/vmp-groups", params={"query": "ibu"}).status_code == 200
    assert client.get("/api/chapter-iv", params={"chapter": "IV", "paragraph": "10680000"}).status_code == 200
    assert groups.queries[0].query == "ibu"
    assert chapter.queries[0].paragraph_name == "10680000"


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_legislation_routes(client: TestClient) -> None:
    basis = LegalBasis(key="RD20180201", title={"fr": "Arrêté royal"})
    handler = _override(dependencies.get_legislation_handler, ApiResult.ok((basis,)))

    response = client.get("/api/legislation", params={"cnk": "0012345", "lang": "fr"})
    client.get("/api/legislation/legal-bases")

    assert response.status_code == 200
    assert response.json()["data"][0]["key"] == "RD20180201"
    assert response.headers["cache-control"] == (
        "public, max-age=86400, s-maxage=604800, stale-while-revalidate=604800"
    )
    assert handler.queries[0].cnk == "0012345"
    assert handler.queries[0].all_legal_bases is False
    assert handler.queries[1].all_legal_bases is True


def test_generic_product_routes(client: TestClient) -> None:
    search = _override(dependencies.get_search_generic_products_handler, ApiResult.ok(()))
    detail = _override(
        dependencies.get_generic_product_handler,
        ApiResult.ok(GenericProduct(vmp_code="12345", name="Paracetamol 500 mg")),
    )

    assert client.get("/api/generic-products", params={"ingredient": "paracetamol"}).status_code == 200
    response = client.get("/api/generic-products/12345", params={"lang": "nl"})

    assert response.json()["data"]["vmpCode"] == "12345"
    assert search.queries[0].ingredient == "paracetamol"
    assert detail.queries[0].vmp_code == "12345"
    assert detail.queries[0].language == "nl"


def test_missing_generic_product_is_404(client: TestClient) -> None:
    _override(
        dependencies.get_generic_product_handler,
        ApiResult.from_exception(NotFoundError("GenericProduct", "99999")),
    )

    response = client.get("/api/generic-products/99999")

    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "GenericProduct '99999' not found"}
    assert response.headers["cache-control"] == "no-store"


def test_medication_detail_route(client: TestClient) -> None:
    detail = MedicationDetail(medication=Medication(amp_code="SAM000001-00", name="Dafalgan"))
    handler = _override(dependencies.get_medication_detail_handler, ApiResult.ok(detail))

    response = client.get("/api/medications/0012345", params={"lang": "fr", "equivalents": "false"})

    assert response.status_code == 200
    assert response.json()["data"]["medication"]["ampCode"] == "SAM000001-00"
    assert handler.queries[0].identifier == "0012345"
    assert handler.queries[0].include_equivalents is False
    assert handler.queries[0].include_reimbursement is True


def _document_proxy(handler) -> DocumentProxy:
    return DocumentProxy(
        DocumentUrlPolicy("app.fagg-afmps.be", "/pharma-status/api/files/"),
        max_bytes=1024,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _use_proxy(handler, max_requests: int = 30) -> None:
    proxy = _document_proxy(handler)
    limiter = RateLimiter(max_requests=max_requests, window_seconds=60, sweep_probability=0)
    app.dependency_overrides[dependencies.get_document_proxy] = lambda: proxy
    app.dependency_overrides[dependencies.get_rate_limiter] = lambda: limiter


def _pdf(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers={"content-type": "application/pdf"}, content=b"%PDF-1.7")


def test_document_proxy_serves_pdf(client: TestClient) -> None:
    _use_proxy(_pdf)

    response = client.get("/api/document-proxy", params={"url": DOCUMENT_URL})

    assert response.status_code == 200
    assert response.content == b"%PDF-1.7"
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == "inline"
    assert response.headers["x-frame-options"] == "SAMEORIGIN"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["cache-control"] == "public, max-age=86400"


def test_document_proxy_requires_url(client: TestClient) -> None:
    _use_proxy(_pdf)

    response = client.get("/api/document-proxy")

    assert response.status_code == 400
    assert response.json() == {"error": "Missing URL parameter"}
    assert ProxyErrorSchema.model_validate(response.json()).error == "Missing URL parameter"


def test_document_proxy_rejects_foreign_host(client: TestClient) -> None:
    _use_proxy(_pdf)

    response = client.get("/api/document-proxy", params={"url": "https://evil.example/pharma-status/api/files/1"})

    assert response.status_code == 403
    assert response.json() == {"error": "URL not allowed"}


def test_document_proxy_rejects_large_documents(client: TestClient) -> None:
    _use_proxy(
        lambda request: httpx.Response(200, headers={"content-type": "application/pdf"}, content=b"x" * 2048)
    )

    response = client.get("/api/document-proxy", params={"url": DOCUMENT_URL})

    assert response.status_code == 413


def test_document_proxy_rate_limit(client: TestClient) -> None:
    _use_proxy(_pdf, max_requests=2)
    headers = {"X-Forwarded-For": "203.0.113.7"}

    statuses = [
        client.get("/api/document-proxy", params={"url": DOCUMENT_URL}, headers=headers).status_code
        for _ in range(3)
    ]
    limited = client.get("/api/document-proxy", params={"url": DOCUMENT_URL}, headers=headers)

    assert statuses == [200, 200, 429]
    assert limited.headers["retry-after"] == "60"
    assert limited.json() == {"error": "Rate limit exceeded"}
    other = client.get("/api/document-proxy", params={"url": DOCUMENT_URL}, headers={"X-Forwarded-For": "198.51.100.1"})
    assert other.status_code == 200
