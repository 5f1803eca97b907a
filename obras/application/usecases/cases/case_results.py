"""
===============================================================================
CASE USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Contrato compartido de resultados/errores para los casos de uso de Casos.

Why (Context / Intención):
    - Los use cases devuelven resultados tipados; la capa HTTP es la única que
      conoce status codes (error_mapping.py).
    - Un único set de códigos evita mensajes y mapeos inconsistentes entre
      create / update / estado / entrega / borrado.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    case_results (module)

Responsibilities:
    - CaseErrorCode: categorías estables de error.
    - CaseError: code + message (+ resource, + errores por campo).
    - CaseResult / CaseListResult / CaseStatsResult.
    - parse_case_id: validar identificadores antes de tocar el storage.

Collaborators:
    - domain.entities.Case, ParroquiaCount
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List
from uuid import UUID

from ....domain.entities import Case, ParroquiaCount

RESOURCE_CASE = "Caso"


class CaseErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: input inválido o incompleto.
      - INVALID_ID: identificador mal formado (no es UUID).
      - UNAUTHORIZED: secreto operativo incorrecto.
      - FORBIDDEN: transición sobre un caso Entregado (terminal).
      - NOT_FOUND: el caso no existe.
      - CONFLICT: unicidad violada o carrera perdida en el cambio de estado.
      - UNSUPPORTED_MEDIA / PAYLOAD_TOO_LARGE: restricciones del adjunto.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNSUPPORTED_MEDIA = "UNSUPPORTED_MEDIA"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"


@dataclass(frozen=True)
class CaseError:
    code: CaseErrorCode
    message: str
    resource: str | None = None
    errors: List[Dict[str, Any]] | None = None


@dataclass
class CaseResult:
    """
    Contrato:
      - Éxito: case != None y error == None
      - Falla:  case == None y error != None
    """

    case: Case | None = None
    error: CaseError | None = None


@dataclass
class CaseListResult:
    """
    Resultado de listado.

    Sin paginación: page / limit quedan en None y total == len(cases).
    """

    cases: List[Case]
    total: int = 0
    page: int | None = None
    limit: int | None = None
    total_pages: int | None = None
    error: CaseError | None = None


@dataclass
class CaseStatsResult:
    items: List[ParroquiaCount]


def case_error(
    code: CaseErrorCode,
    message: str,
    *,
    errors: List[Dict[str, Any]] | None = None,
) -> CaseResult:
    return CaseResult(
        error=CaseError(code=code, message=message, resource=RESOURCE_CASE, errors=errors)
    )


def not_found_result() -> CaseResult:
    return case_error(CaseErrorCode.NOT_FOUND, "Caso no encontrado.")


def parse_case_id(raw: str | UUID | None) -> tuple[UUID | None, CaseError | None]:
    """Valida el identificador. Devuelve (uuid, None) o (None, INVALID_ID)."""
    if isinstance(raw, UUID):
        return raw, None
    try:
        return UUID(str(raw or "").strip()), None
    except ValueError:
        return None, CaseError(
            code=CaseErrorCode.INVALID_ID,
            message=f"Identificador inválido: '{raw}'",
            resource=RESOURCE_CASE,
        )


def utc_now() -> datetime:
    """Reloj por defecto de los casos de uso (inyectable en tests)."""
    return datetime.now(timezone.utc)
