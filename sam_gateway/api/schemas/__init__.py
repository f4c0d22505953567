"""
API Schemas
"""
from .common_schemas import (
    ApiErrorSchema,
    ApiResponseSchema,
    HealthSchema,
    ProxyErrorSchema,
    ResultMetaSchema,
)

__all__ = [
    "ApiErrorSchema",
    "ApiResponseSchema",
    "HealthSchema",
    "ProxyErrorSchema",
    "ResultMetaSchema",
]
