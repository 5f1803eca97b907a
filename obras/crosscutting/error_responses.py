# obras/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Errores HTTP como Problem Details (RFC 7807)
===============================================================================

Todas las respuestas de error de la API comparten el mismo cuerpo
`application/problem+json` con un `code` estable que el frontend usa para
decidir qué mostrar. El status HTTP sale del código:

  400 -> VALIDATION_ERROR, INVALID_ID, UNSUPPORTED_MEDIA, PAYLOAD_TOO_LARGE
  401 -> UNAUTHORIZED
  403 -> FORBIDDEN
  404 -> NOT_FOUND
  409 -> CONFLICT
  413 -> BODY_TOO_LARGE (límite global del request, fuera de las rutas de upload)
  500 -> INTERNAL_ERROR (también fallas de base de datos y de disco)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Responsabilidades:
  - Catálogo ErrorCode (con su status) y modelo ErrorDetail.
  - AppHTTPException + factories usadas por error_mapping, routers y middleware.
  - Render único del cuerpo problem+json (handler y middleware ASGI).

Colaboradores:
  - interfaces/api/http/error_mapping.py
  - crosscutting/middleware.py
  - api/exception_handlers.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    UNSUPPORTED_MEDIA = "UNSUPPORTED_MEDIA"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    BODY_TOO_LARGE = "BODY_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_ID: 400,
    ErrorCode.UNSUPPORTED_MEDIA: 400,
    ErrorCode.PAYLOAD_TOO_LARGE: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.BODY_TOO_LARGE: 413,
    ErrorCode.INTERNAL_ERROR: 500,
}


class ErrorDetail(BaseModel):
    """Cuerpo problem+json; `errors` lleva detalle por campo y el request_id."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    key: {
        "description": f"{label} (RFC7807)",
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }
    for key, label in (
        ("400", "Datos inválidos / adjunto rechazado"),
        ("401", "Credenciales o secreto inválido"),
        ("403", "Caso entregado"),
        ("404", "No encontrado"),
        ("409", "Conflicto"),
        ("default", "Error"),
    )
}


class AppHTTPException(HTTPException):
    """HTTPException cuyo status lo fija el ErrorCode."""

    def __init__(
        self,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(code.http_status, detail)
        self.code = code
        self.errors = errors

    def to_problem(
        self, *, instance: str | None = None, request_id: str | None = None
    ) -> dict[str, Any]:
        extra = [{"request_id": request_id}] if request_id else []
        return ErrorDetail(
            type=f"about:blank/{self.code.value.lower()}",
            title=self.code.value.replace("_", " ").title(),
            status=self.status_code,
            detail=str(self.detail),
            code=self.code,
            instance=instance,
            errors=[*(self.errors or []), *extra] or None,
        ).model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Factories (una por código)
# ---------------------------------------------------------------------------
def validation_error(
    message: str, field_errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(ErrorCode.VALIDATION_ERROR, message, field_errors)


def invalid_id(message: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.INVALID_ID, message)


def unsupported_media(message: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.UNSUPPORTED_MEDIA, message)


def payload_too_large(message: str) -> AppHTTPException:
    # Rechazo del adjunto (400), no el 413 del límite global.
    return AppHTTPException(ErrorCode.PAYLOAD_TOO_LARGE, message)


def unauthorized(message: str = "Credenciales inválidas.") -> AppHTTPException:
    return AppHTTPException(ErrorCode.UNAUTHORIZED, message)


def forbidden(message: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.FORBIDDEN, message)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(
        ErrorCode.NOT_FOUND, f"{resource} '{identifier}' no encontrado"
    )


def conflict(message: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.CONFLICT, message)


def body_too_large(max_bytes: int) -> AppHTTPException:
    return AppHTTPException(
        ErrorCode.BODY_TOO_LARGE,
        f"Request body demasiado grande. Máximo permitido: {max_bytes} bytes",
    )


def internal_error(message: str = "Error interno del servidor.") -> AppHTTPException:
    return AppHTTPException(ErrorCode.INTERNAL_ERROR, message)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    problem = exc.to_problem(
        instance=str(request.url),
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        problem,
        status_code=exc.status_code,
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
