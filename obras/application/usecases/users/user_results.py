"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Contrato estable de resultados y errores para registro, login y consulta
    de usuarios. Los use cases no lanzan excepciones hacia afuera: la API
    traduce el código a HTTP (interfaces/api/http/error_mapping.py).

Códigos:
    - VALIDATION_ERROR: campos faltantes/vacíos o rol inválido.
    - UNAUTHORIZED: credenciales inválidas (mismo mensaje para ambos casos).
    - CONFLICT: username ya registrado.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ....identity.users import UserProfile

INVALID_CREDENTIALS_MESSAGE = "Credenciales inválidas."


class UserErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str


@dataclass
class UserResult:
    """Éxito: user != None. Falla: error != None."""

    user: UserProfile | None = None
    error: UserError | None = None
