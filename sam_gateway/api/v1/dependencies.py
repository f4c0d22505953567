"""Shared FastAPI dependencies for v1 API routers.

These factories centralize construction of the registry client, the cache
and the document proxy so routers can depend on simple callables. Tests
swap them through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict

from sam_gateway.application.queries.get_chapter_iv import GetChapterIVHandler
from sam_gateway.application.queries.generic_products import GetGenericProductHandler, SearchGenericProductsHandler
from sam_gateway.application.queries.get_legislation import GetLegislationHandler
from sam_gateway.application.queries.get_medication_detail import GetMedicationDetailHandler
from sam_gateway.application.queries.get_reimbursement import GetReimbursementHandler
from sam_gateway.application.queries.get_standard_dosages import GetStandardDosagesHandler
from sam_gateway.application.queries.get_vmp_groups import GetVmpGroupsHandler
from sam_gateway.application.queries.search_atc import SearchAtcHandler
from sam_gateway.application.queries.search_companies import SearchCompaniesHandler
from sam_gateway.application.queries.search_medications import SearchMedicationsHandler
from sam_gateway.config import get_settings
from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass
from sam_gateway.infrastructure.cache.response_cache import ResponseCache
from sam_gateway.infrastructure.proxy.document_proxy import DocumentProxy
from sam_gateway.infrastructure.proxy.rate_limiter import RateLimiter
from sam_gateway.infrastructure.proxy.url_policy import DocumentUrlPolicy
from sam_gateway.infrastructure.soap.registry_client import SamRegistryClient
from sam_gateway.infrastructure.soap.transport_client import SamTransportClient


@lru_cache()
def _cache_policies() -> Dict[DataClass, CachePolicy]:
    return get_settings().cache_policies()


def get_cache_policies() -> Dict[DataClass, CachePolicy]:
    """Provide the per-data-class freshness policies."""
    return _cache_policies()


@lru_cache()
def _response_cache() -> ResponseCache:
    settings = get_settings()
    return ResponseCache(
        _cache_policies(),
        max_entries=settings.cache_max_entries,
        sweep_probability=settings.cache_sweep_probability,
    )


@lru_cache()
def _registry_client() -> SamRegistryClient:
    settings = get_settings()
    transport = SamTransportClient(
        settings.sam_endpoint,
        timeout=settings.sam_timeout_seconds,
        user_agent=settings.sam_user_agent,
    )
    return SamRegistryClient(transport, _response_cache())


def get_registry_client() -> SamRegistryClient:
    """Provide a singleton registry client."""
    return _registry_client()


@lru_cache()
def _search_atc_handler() -> SearchAtcHandler:
    return SearchAtcHandler(_registry_client())


def get_search_atc_handler() -> SearchAtcHandler:
    """Provide a cached SearchAtc handler."""
    return _search_atc_handler()


@lru_cache()
def _reimbursement_handler() -> GetReimbursementHandler:
    return GetReimbursementHandler(_registry_client())


def get_reimbursement_handler() -> GetReimbursementHandler:
    """Provide a cached GetReimbursement handler."""
    return _reimbursement_handler()


@lru_cache()
def _standard_dosages_handler() -> GetStandardDosagesHandler:
    return GetStandardDosagesHandler(_registry_client())


def get_standard_dosages_handler() -> GetStandardDosagesHandler:
    """Provide a cached GetStandardDosages handler."""
    return _standard_dosages_handler()


@lru_cache()
def _search_companies_handler() -> SearchCompaniesHandler:
    return SearchCompaniesHandler(_registry_client())


def get_search_companies_handler() -> SearchCompaniesHandler:
    """Provide a cached SearchCompanies handler."""
    return _search_companies_handler()


@lru_cache()
def _search_medications_handler() -> SearchMedicationsHandler:
    return SearchMedicationsHandler(_registry_client())


def get_search_medications_handler() -> SearchMedicationsHandler:
    """Provide a cached SearchMedications handler."""
    return _search_medications_handler()


@lru_cache()
def _vmp_groups_handler() -> GetVmpGroupsHandler:
    return GetVmpGroupsHandler(_registry_client())


def get_vmp_groups_handler() -> GetVmpGroupsHandler:
    """Provide a cached GetVmpGroups handler."""
    return _vmp_groups_handler()


@lru_cache()
def _chapter_iv_handler() -> GetChapterIVHandler:
    return GetChapterIVHandler(_registry_client())


def get_chapter_iv_handler() -> GetChapterIVHandler:
    """Provide a cached GetChapterIV handler."""
    return _chapter_iv_handler()


@lru_cache()
def _medication_detail_handler() -> GetMedicationDetailHandler:
    return GetMedicationDetailHandler(_registry_client())


def get_medication_detail_handler() -> GetMedicationDetailHandler:
    """Provide a cached GetMedicationDetail handler."""
    return _medication_detail_handler()


@lru_cache()
def _search_generic_products_handler() -> SearchGenericProductsHandler:
    return SearchGenericProductsHandler(_registry_client())


def get_search_generic_products_handler() -> SearchGenericProductsHandler:
    """Provide a cached SearchGenericProducts handler."""
    return _search_generic_products_handler()


@lru_cache()
def _generic_product_handler() -> GetGenericProductHandler:
    return GetGenericProductHandler(_registry_client())


def get_generic_product_handler() -> GetGenericProductHandler:
    """Provide a cached GetGenericProduct handler."""
    return _generic_product_handler()


@lru_cache()
def _legislation_handler() -> GetLegislationHandler:
    return GetLegislationHandler(_registry_client())


def get_legislation_handler() -> GetLegislationHandler:
    """Provide a cached GetLegislation handler."""
    return _legislation_handler()


@lru_cache()
def _document_proxy() -> DocumentProxy:
    settings = get_settings()
    policy = DocumentUrlPolicy(
        allowed_host=settings.document_proxy_allowed_host,
        path_prefix=settings.document_proxy_path_prefix,
    )
    return DocumentProxy(
        policy,
        max_bytes=settings.document_proxy_max_bytes,
        timeout=settings.document_proxy_timeout_seconds,
        content_type=settings.document_proxy_content_type,
        user_agent=settings.document_proxy_user_agent,
    )


def get_document_proxy() -> DocumentProxy:
    """Provide a singleton document proxy."""
    return _document_proxy()


@lru_cache()
def _rate_limiter() -> RateLimiter:
    settings = get_settings()
    return RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        sweep_probability=settings.rate_limit_sweep_probability,
    )


def get_rate_limiter() -> RateLimiter:
    """Provide the process-wide document proxy rate limiter."""
    return _rate_limiter()


async def close_clients() -> None:
    """Close outbound HTTP clients that were created."""
    if _registry_client.cache_info().currsize:
        await _registry_client().close()
    if _document_proxy.cache_info().currsize:
        await _document_proxy().close()
