"""
Common schemas shared across different API endpoints
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class ApiErrorSchema(BaseModel):
    code: str
    message: str


class ResultMetaSchema(BaseModel):
    searchDate: Optional[str] = None
    samId: Optional[str] = None
    totalResults: Optional[int] = None


class ApiResponseSchema(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[ApiErrorSchema] = None
    meta: Optional[ResultMetaSchema] = None


class ProxyErrorSchema(BaseModel):
    error: str


class HealthSchema(BaseModel):
    status: str
    version: str
    endpoint: str
