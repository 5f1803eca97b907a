"""
===============================================================================
USE CASE: Create Comuna
===============================================================================

Responsibilities:
    - Validar nombre, codigo_circuito_comunal y parroquia (no vacíos).
    - Validar cada consejo comunal (nombre + codigo_situr).
    - Persistir la comuna en el catálogo.

Collaborators:
    - ComunaRepository.create_comuna
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence
from uuid import uuid4

from ....domain.entities import Comuna, ConsejoComunal
from ....domain.repositories import ComunaRepository
from .comuna_results import ComunaError, ComunaErrorCode, ComunaResult

_REQUIRED = ("nombre", "codigo_circuito_comunal", "parroquia")


@dataclass(frozen=True)
class CreateComunaInput:
    nombre: str | None
    codigo_circuito_comunal: str | None
    parroquia: str | None
    consejos_comunales: Sequence[Mapping[str, Any]] = field(default_factory=list)


class CreateComunaUseCase:
    def __init__(self, repository: ComunaRepository) -> None:
        self._comunas = repository

    def execute(self, input_data: CreateComunaInput) -> ComunaResult:
        errors: List[Dict[str, Any]] = []
        values = {}
        for name in _REQUIRED:
            value = (getattr(input_data, name) or "").strip()
            if not value:
                errors.append({"field": name, "msg": f"El campo {name} es obligatorio."})
            values[name] = value

        consejos: List[ConsejoComunal] = []
        for index, raw in enumerate(input_data.consejos_comunales or []):
            nombre = str(raw.get("nombre") or "").strip()
            codigo = str(raw.get("codigo_situr") or "").strip()
            if not nombre or not codigo:
                errors.append(
                    {
                        "field": f"consejos_comunales[{index}]",
                        "msg": "Cada consejo comunal requiere nombre y codigo_situr.",
                    }
                )
                continue
            consejos.append(ConsejoComunal(nombre=nombre, codigo_situr=codigo))

        if errors:
            return ComunaResult(
                error=ComunaError(
                    code=ComunaErrorCode.VALIDATION_ERROR,
                    message="Datos de la comuna inválidos.",
                    errors=errors,
                )
            )

        comuna = Comuna(id=uuid4(), consejos_comunales=consejos, **values)
        return ComunaResult(comuna=self._comunas.create_comuna(comuna))
