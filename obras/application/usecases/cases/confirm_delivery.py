"""
===============================================================================
USE CASE: Confirm Delivery (entrega protegida por secreto)
===============================================================================

Business Goal:
    Marcar un caso como Entregado con fecha de entrega, sólo si quien lo pide
    conoce el secreto operativo CONFIRM_CASE_TOKEN.

Orden de validación:
    1) INVALID_ID
    2) UNAUTHORIZED (secreto incorrecto; no hay mutación)
    3) NOT_FOUND

Notas:
    - Comparación del secreto en tiempo constante (secrets_match).
    - Re-confirmar un caso ya entregado vuelve a setear la fecha y agrega otra
      actuación (comportamiento heredado del sistema original).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from uuid import UUID

from ....crosscutting.config import OperationalSecrets
from ....crosscutting.logger import logger
from ....domain.entities import DEFAULT_ACTOR, Actuacion
from ....domain.repositories import CaseRepository
from ....identity.passwords import secrets_match
from ..users.user_results import INVALID_CREDENTIALS_MESSAGE
from .case_results import (
    CaseErrorCode,
    CaseResult,
    case_error,
    not_found_result,
    parse_case_id,
    utc_now,
)

DELIVERY_NOTE = "Caso entregado."


class ConfirmDeliveryUseCase:
    def __init__(
        self,
        repository: CaseRepository,
        secrets: OperationalSecrets,
        *,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._cases = repository
        self._secrets = secrets
        self._now = now

    def execute(
        self,
        case_id: str | UUID,
        supplied_secret: str | None,
        acting_user: str | None = None,
    ) -> CaseResult:
        parsed_id, id_error = parse_case_id(case_id)
        if id_error is not None:
            return CaseResult(error=id_error)

        if not secrets_match(supplied_secret, self._secrets.confirm_case_token):
            logger.warning(
                "Confirmación de entrega rechazada", extra={"case_id": str(parsed_id)}
            )
            return case_error(CaseErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)

        now = self._now()
        updated = self._cases.mark_case_delivered(
            parsed_id,
            fecha_entrega=now.date(),
            actuacion=Actuacion(
                descripcion=DELIVERY_NOTE,
                fecha=now,
                usuario=(acting_user or "").strip() or DEFAULT_ACTOR,
            ),
        )
        if updated is None:
            return not_found_result()

        logger.info("Caso entregado", extra={"case_id": str(parsed_id)})
        return CaseResult(case=updated)
