"""
===============================================================================
TARJETA CRC: obras/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a respuestas HTTP RFC7807.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en producción.

Tabla:
  - UniqueConstraintError      -> 409 CONFLICT
  - DatabaseError              -> 500 INTERNAL_ERROR (mensaje genérico, log completo)
  - StorageError               -> 500 INTERNAL_ERROR (mensaje genérico)
  - RequestValidationError     -> 400 VALIDATION_ERROR
  - AppHTTPException           -> su status
  - Exception (no tipada)      -> 500 INTERNAL_ERROR (detalle sólo fuera de prod)

Colaboradores:
  - crosscutting.error_responses: factories + app_exception_handler
  - crosscutting.exceptions: ObrasError y derivadas
  - infrastructure.storage.errors.StorageError
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    app_exception_handler,
    conflict,
    internal_error,
    validation_error,
)
from ..crosscutting.exceptions import DatabaseError, UniqueConstraintError
from ..crosscutting.logger import logger
from ..infrastructure.storage.errors import StorageError

_GENERIC_DETAIL = "Error interno del servidor."


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def unique_constraint_handler(
    request: Request, exc: UniqueConstraintError
) -> JSONResponse:
    logger.warning(
        "Violación de unicidad",
        extra={
            "error_id": exc.error_id,
            "constraint": exc.constraint,
            "request_id": _request_id_from(request),
        },
    )
    app_exc = conflict("El recurso ya existe.")
    app_exc.errors = [{"error_id": exc.error_id}]
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    # El cliente recibe el 500 genérico; mensaje y causa quedan sólo en el log.
    logger.error(
        "Error de base de datos",
        exc_info=exc.original_error or exc,
        extra={
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": _request_id_from(request),
        },
    )
    app_exc = internal_error(_GENERIC_DETAIL)
    app_exc.errors = [{"error_id": exc.error_id}]
    return await app_exception_handler(request, app_exc)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(
        "Error de storage",
        exc_info=exc,
        extra={"request_id": _request_id_from(request)},
    )
    return await app_exception_handler(
        request, internal_error("No se pudo procesar el archivo.")
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return await app_exception_handler(
        request, validation_error("Datos de entrada inválidos.", errors)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler de último recurso para excepciones no tipadas.

    - Log completo (stacktrace).
    - Fuera de producción el detalle incluye el texto del error.
    """
    logger.error(
        "Excepción no controlada",
        exc_info=exc,
        extra={"request_id": _request_id_from(request), "error": str(exc)},
    )
    detail = _GENERIC_DETAIL if get_settings().is_production() else str(exc)
    return await app_exception_handler(request, internal_error(detail or _GENERIC_DETAIL))


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - UniqueConstraintError tiene handler propio (subclase de DatabaseError).
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(UniqueConstraintError, unique_constraint_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
