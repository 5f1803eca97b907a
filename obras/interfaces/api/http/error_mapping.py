"""
===============================================================================
TARJETA CRC: error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener la capa de aplicación libre de HTTP.

Colaboradores:
  - application.usecases.* (CaseError, UserError, ComunaError)
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from ....application.usecases.cases import CaseError, CaseErrorCode
from ....application.usecases.comunas import ComunaError
from ....application.usecases.users import UserError, UserErrorCode
from ....crosscutting.error_responses import (
    conflict,
    forbidden,
    internal_error,
    invalid_id,
    not_found,
    payload_too_large,
    unauthorized,
    unsupported_media,
    validation_error,
)


def raise_case_error(error: CaseError, *, case_id: str | None = None) -> NoReturn:
    """Traduce CaseErrorCode -> HTTP."""
    code = error.code
    if code == CaseErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message, error.errors)
    if code == CaseErrorCode.INVALID_ID:
        raise invalid_id(error.message)
    if code == CaseErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if code == CaseErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if code == CaseErrorCode.NOT_FOUND:
        raise not_found(error.resource or "Caso", case_id or "-")
    if code == CaseErrorCode.CONFLICT:
        raise conflict(error.message)
    if code == CaseErrorCode.UNSUPPORTED_MEDIA:
        raise unsupported_media(error.message)
    if code == CaseErrorCode.PAYLOAD_TOO_LARGE:
        raise payload_too_large(error.message)

    # Fallback: si aparece un código nuevo sin mapeo
    raise internal_error(error.message)


def raise_user_error(error: UserError) -> NoReturn:
    if error.code == UserErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if error.code == UserErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if error.code == UserErrorCode.CONFLICT:
        raise conflict(error.message)
    raise internal_error(error.message)


def raise_comuna_error(error: ComunaError) -> NoReturn:
    raise validation_error(error.message, error.errors)
