"""
CachePolicy value object

Freshness configuration for one data class. The server-side tier decides
when a stored registry response must be fetched again; the client tier is
advertised to UI clients through Cache-Control headers.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DataClass(str, Enum):
    """Update-frequency tiers of registry data."""
    VOLATILE_CLINICAL = "volatileClinical"
    CORE_REFERENCE_DATA = "coreReferenceData"
    STATIC_REFERENCE_DATA = "staticReferenceData"


@dataclass(frozen=True)
class CachePolicy:
    """
    Immutable freshness policy.

    Raises:
        ValueError: If a duration is negative or the client window exceeds
            the server revalidation interval.
    """
    revalidate_seconds: int
    client_stale_seconds: int
    stale_while_revalidate_seconds: int = 0

    def __post_init__(self):
        for name in ("revalidate_seconds", "client_stale_seconds", "stale_while_revalidate_seconds"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.client_stale_seconds > self.revalidate_seconds:
            raise ValueError("client_stale_seconds must not exceed revalidate_seconds")

    def is_fresh(self, age_seconds: float) -> bool:
        """True while a stored response of this age may still be served."""
        return age_seconds < self.revalidate_seconds

    def cache_control_header(self, *, public: bool = True) -> str:
        parts = []
        if public:
            parts.append("public")
        parts.append(f"max-age={self.client_stale_seconds}")
        parts.append(f"s-maxage={self.revalidate_seconds}")
        if self.stale_while_revalidate_seconds:
            parts.append(f"stale-while-revalidate={self.stale_while_revalidate_seconds}")
        return ", ".join(parts)
