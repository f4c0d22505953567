from __future__ import annotations

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .app_logging import configure_logging
from .api.v1.dependencies import close_clients
from .api.v1.routers import (
  atc,
  chapter_iv,
  companies,
  document_proxy,
  dosages,
  generic_products,
  health,
  legislation,
  medications,
  reimbursement,
  vmp_groups,
)
from .config import get_settings

load_dotenv()
configure_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI):
  yield
  await close_clients()


app = FastAPI(title="SAM Gateway", version=__version__, lifespan=lifespan)

app.add_middleware(
  CORSMiddleware,
  allow_origins=get_settings().cors_origins(),
  allow_credentials=False,
  allow_methods=["GET"],
  allow_headers=["*"],
)

api_router = APIRouter(prefix="/api")
api_router.include_router(atc.router)
api_router.include_router(reimbursement.router)
api_router.include_router(dosages.router)
api_router.include_router(companies.router)
api_router.include_router(medications.router)
api_router.include_router(generic_products.router)
api_router.include_router(vmp_groups.router)
api_router.include_router(chapter_iv.router)
api_router.include_router(legislation.router)
api_router.include_router(document_proxy.router)
api_router.include_router(health.router)

app.include_router(api_router)
