"""
===============================================================================
TARJETA CRC: router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI.
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por bounded context (users/casos/uploads/comunas/config).

Notas:
  - build_router() evita side-effects al importar y facilita tests.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.cases import router as cases_router
from .routers.comunas import router as comunas_router
from .routers.config import router as config_router
from .routers.uploads import router as uploads_router
from .routers.users import router as users_router


def build_router() -> APIRouter:
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(users_router)
    api_router.include_router(uploads_router)
    api_router.include_router(cases_router)
    api_router.include_router(comunas_router)
    api_router.include_router(config_router)

    return api_router


__all__ = ["build_router"]
