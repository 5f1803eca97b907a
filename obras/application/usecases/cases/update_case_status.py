"""
===============================================================================
USE CASE: Update Case Status (transición genérica de estado)
===============================================================================

Business Goal:
    Mover un caso entre Cargado / Supervisado / En Desarrollo dejando una
    modificación {campo: "estado"} en la MISMA escritura que el cambio.

Why (Context / Intención):
    - Entregado es terminal: sólo confirm-delivery lo setea y, una vez
      entregado, ningún cambio genérico lo saca de ahí.
    - La escritura es compare-and-set (WHERE estado = <esperado>): si otro
      request cambió el estado en el medio, se relee y se re-evalúa. Así una
      carrera contra confirm-delivery nunca "des-entrega" un caso.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    UpdateCaseStatusUseCase

Responsibilities:
    - Validar id (INVALID_ID) y estado destino (VALIDATION_ERROR).
    - Rechazar transiciones desde Entregado (FORBIDDEN), aun con destino inválido.
    - Reintentar el compare-and-set hasta max_attempts; luego CONFLICT.

Collaborators:
    - CaseRepository.get_case / update_case_status
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import MANUAL_STATUSES, CaseStatus, Modificacion
from ....domain.repositories import CaseRepository
from .case_results import (
    CaseErrorCode,
    CaseResult,
    case_error,
    not_found_result,
    parse_case_id,
    utc_now,
)

_ALLOWED = ", ".join(s.value for s in CaseStatus if s in MANUAL_STATUSES)


def _delivered_error() -> CaseResult:
    return case_error(
        CaseErrorCode.FORBIDDEN,
        "El caso ya fue entregado y su estado no puede modificarse.",
    )


class UpdateCaseStatusUseCase:
    def __init__(
        self,
        repository: CaseRepository,
        *,
        max_attempts: int = 3,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._cases = repository
        self._max_attempts = max(1, max_attempts)
        self._now = now

    def execute(
        self,
        case_id: str | UUID,
        new_status: str | None,
        acting_user: str | None = None,
    ) -> CaseResult:
        parsed_id, id_error = parse_case_id(case_id)
        if id_error is not None:
            return CaseResult(error=id_error)

        target = self._parse_status(new_status)
        if target is None:
            # Un caso entregado responde FORBIDDEN sea cual sea el destino.
            current = self._cases.get_case(parsed_id)
            if current is not None and current.is_delivered:
                return _delivered_error()
            return case_error(
                CaseErrorCode.VALIDATION_ERROR,
                f"Estado inválido. Valores permitidos: {_ALLOWED}.",
            )

        for attempt in range(1, self._max_attempts + 1):
            current = self._cases.get_case(parsed_id)
            if current is None:
                return not_found_result()
            if current.is_delivered:
                return _delivered_error()

            modificacion = Modificacion.record(
                "estado",
                current.estado,
                target,
                fecha=self._now(),
                usuario=(acting_user or "").strip() or None,
            )
            updated = self._cases.update_case_status(
                parsed_id,
                expected=current.estado,
                new_status=target,
                modificacion=modificacion,
            )
            if updated is not None:
                return CaseResult(case=updated)

            logger.warning(
                "Cambio de estado concurrente, reintentando",
                extra={"case_id": str(parsed_id), "attempt": attempt},
            )

        return case_error(
            CaseErrorCode.CONFLICT,
            "El caso fue modificado concurrentemente. Intente nuevamente.",
        )

    @staticmethod
    def _parse_status(raw: str | None) -> CaseStatus | None:
        try:
            status = CaseStatus((raw or "").strip())
        except ValueError:
            return None
        return status if status in MANUAL_STATUSES else None
