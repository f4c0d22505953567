"""Hardened document proxy."""

from .document_proxy import DocumentProxy, ProxiedDocument
from .rate_limiter import RateLimitDecision, RateLimiter, RateLimitRecord, client_key_from_headers
from .url_policy import DocumentUrlPolicy

__all__ = [
    "DocumentProxy",
    "ProxiedDocument",
    "RateLimitDecision",
    "RateLimiter",
    "RateLimitRecord",
    "client_key_from_headers",
    "DocumentUrlPolicy",
]
