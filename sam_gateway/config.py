from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass

# Ensure environment variables from the repository root .env are available
# regardless of the working directory used to start the process.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings(BaseSettings):
  sam_endpoint: str = Field(
    default="https://apps.samdb.ehealth.fgov.be/samv2/dics/v5",
    alias="SAM_ENDPOINT",
  )
  sam_timeout_seconds: float = Field(default=30.0, alias="SAM_TIMEOUT_SECONDS")
  sam_user_agent: str = Field(default="sam-gateway/0.1", alias="SAM_USER_AGENT")

  cache_max_entries: int = Field(default=5000, alias="CACHE_MAX_ENTRIES")
  cache_sweep_probability: float = Field(default=0.01, alias="CACHE_SWEEP_PROBABILITY")

  volatile_clinical_revalidate_seconds: int = Field(default=21600, alias="CACHE_VOLATILE_REVALIDATE_SECONDS")
  volatile_clinical_client_stale_seconds: int = Field(default=300, alias="CACHE_VOLATILE_CLIENT_STALE_SECONDS")
  volatile_clinical_swr_seconds: int = Field(default=86400, alias="CACHE_VOLATILE_SWR_SECONDS")
  core_reference_revalidate_seconds: int = Field(default=86400, alias="CACHE_CORE_REVALIDATE_SECONDS")
  core_reference_client_stale_seconds: int = Field(default=86400, alias="CACHE_CORE_CLIENT_STALE_SECONDS")
  core_reference_swr_seconds: int = Field(default=604800, alias="CACHE_CORE_SWR_SECONDS")
  static_reference_revalidate_seconds: int = Field(default=604800, alias="CACHE_STATIC_REVALIDATE_SECONDS")
  static_reference_client_stale_seconds: int = Field(default=86400, alias="CACHE_STATIC_CLIENT_STALE_SECONDS")
  static_reference_swr_seconds: int = Field(default=604800, alias="CACHE_STATIC_SWR_SECONDS")

  document_proxy_allowed_host: str = Field(default="app.fagg-afmps.be", alias="DOCUMENT_PROXY_ALLOWED_HOST")
  document_proxy_path_prefix: str = Field(
    default="/pharma-status/api/files/",
    alias="DOCUMENT_PROXY_PATH_PREFIX",
  )
  document_proxy_timeout_seconds: float = Field(default=30.0, alias="DOCUMENT_PROXY_TIMEOUT_SECONDS")
  document_proxy_max_bytes: int = Field(default=50 * 1024 * 1024, alias="DOCUMENT_PROXY_MAX_BYTES")
  document_proxy_content_type: str = Field(default="application/pdf", alias="DOCUMENT_PROXY_CONTENT_TYPE")
  document_proxy_user_agent: str = Field(default="MedSearch/1.0", alias="DOCUMENT_PROXY_USER_AGENT")
  rate_limit_max_requests: int = Field(default=30, alias="RATE_LIMIT_MAX_REQUESTS")
  rate_limit_window_seconds: int = Field(default=60, alias="RATE_LIMIT_WINDOW_SECONDS")
  rate_limit_sweep_probability: float = Field(default=0.01, alias="RATE_LIMIT_SWEEP_PROBABILITY")

  cors_allow_origins: str = Field(default="*", alias="CORS_ALLOW_ORIGINS")

  log_level: str = Field(default="INFO", alias="LOG_LEVEL")
  log_format: str = Field(default="json", alias="LOG_FORMAT")
  service_name: str = Field(default="sam-gateway", alias="SERVICE_NAME")

  def cache_policies(self) -> Dict[DataClass, CachePolicy]:
    return {
      DataClass.VOLATILE_CLINICAL: CachePolicy(
        revalidate_seconds=self.volatile_clinical_revalidate_seconds,
        client_stale_seconds=self.volatile_clinical_client_stale_seconds,
        stale_while_revalidate_seconds=self.volatile_clinical_swr_seconds,
      ),
      DataClass.CORE_REFERENCE_DATA: CachePolicy(
        revalidate_seconds=self.core_reference_revalidate_seconds,
        client_stale_seconds=self.core_reference_client_stale_seconds,
        stale_while_revalidate_seconds=self.core_reference_swr_seconds,
      ),
      DataClass.STATIC_REFERENCE_DATA: CachePolicy(
        revalidate_seconds=self.static_reference_revalidate_seconds,
        client_stale_seconds=self.static_reference_client_stale_seconds,
        stale_while_revalidate_seconds=self.static_reference_swr_seconds,
      ),
    }

  def cors_origins(self) -> list[str]:
    origins = [origin.strip() for origin in (self.cors_allow_origins or "").split(",")]
    return [origin for origin in origins if origin] or ["*"]

  class Config:
    case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
