"""
===============================================================================
USE CASE: Add Actuación
===============================================================================

Responsibilities:
    - Agregar una nota libre al final del historial del caso.
    - Atribuirla al usuario que actúa ("Sistema" si no viene).

Collaborators:
    - CaseRepository.append_actuacion (escritura atómica de una sola fila)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from uuid import UUID

from ....domain.entities import Actuacion, DEFAULT_ACTOR
from ....domain.repositories import CaseRepository
from .case_results import (
    CaseErrorCode,
    CaseResult,
    case_error,
    not_found_result,
    parse_case_id,
    utc_now,
)


class AddActuacionUseCase:
    def __init__(
        self,
        repository: CaseRepository,
        *,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._cases = repository
        self._now = now

    def execute(
        self,
        case_id: str | UUID,
        descripcion: str | None,
        acting_user: str | None = None,
    ) -> CaseResult:
        parsed_id, id_error = parse_case_id(case_id)
        if id_error is not None:
            return CaseResult(error=id_error)

        text = (descripcion or "").strip()
        if not text:
            return case_error(
                CaseErrorCode.VALIDATION_ERROR, "La descripción es obligatoria."
            )

        actuacion = Actuacion(
            descripcion=text,
            fecha=self._now(),
            usuario=(acting_user or "").strip() or DEFAULT_ACTOR,
        )
        updated = self._cases.append_actuacion(parsed_id, actuacion)
        if updated is None:
            return not_found_result()
        return CaseResult(case=updated)
