"""Resultados / errores de los casos de uso de Comunas."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from ....domain.entities import Comuna


class ComunaErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass(frozen=True)
class ComunaError:
    code: ComunaErrorCode
    message: str
    errors: List[Dict[str, Any]] | None = None


@dataclass
class ComunaResult:
    comuna: Comuna | None = None
    error: ComunaError | None = None


@dataclass
class ComunaListResult:
    comunas: List[Comuna]
