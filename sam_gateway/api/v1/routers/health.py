"""Liveness route."""
from __future__ import annotations

from fastapi import APIRouter

from sam_gateway import __version__
from sam_gateway.api.schemas import HealthSchema
from sam_gateway.config import get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthSchema)
def health() -> HealthSchema:
    return HealthSchema(status="ok", version=__version__, endpoint=get_settings().sam_endpoint)
