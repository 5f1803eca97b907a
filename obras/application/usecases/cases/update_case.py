"""
===============================================================================
USE CASE: Update Case (replaceFields)
===============================================================================

Business Goal:
    Editar los campos descriptivos de un caso dejando rastro de auditoría.

Why (Context / Intención):
    - El cliente no decide qué se audita: el servidor compara valor anterior
      y nuevo y agrega UNA modificación por campo que realmente cambió.
    - Las bitácoras son append-only: `actuaciones` en el payload sólo se
      acepta si extiende la lista actual (prefijo idéntico); se agrega la cola.
    - Campos del sistema (id, estado, fechaEntrega, modificaciones, fechas de
      auditoría) se ignoran: tienen su propio camino.
    - `archivo` sólo puede apuntar a un PDF ya subido (/upload) que ningún otro
      caso use: el borrado de un caso descarta su adjunto.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    UpdateCaseUseCase

Responsibilities:
    - Validar id (INVALID_ID) y existencia (NOT_FOUND).
    - Normalizar los campos presentes (VALIDATION_ERROR).
    - Calcular modificaciones y cola de actuaciones.
    - Persistir campos + entradas de bitácora en una sola escritura.

Collaborators:
    - CaseRepository.get_case / update_case_fields
    - case_fields.normalize_case_fields
    - AttachmentIntake.exists / CaseRepository.archivo_in_use
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Tuple
from uuid import UUID

from ....crosscutting.exceptions import UniqueConstraintError
from ....domain.entities import (
    DEFAULT_ACTOR,
    EDITABLE_FIELDS,
    Actuacion,
    Modificacion,
)
from ....domain.repositories import CaseRepository
from ...attachments import AttachmentIntake
from .case_fields import normalize_case_fields, summarize_errors
from .case_results import (
    CaseErrorCode,
    CaseResult,
    case_error,
    not_found_result,
    parse_case_id,
    utc_now,
)

_MSG_APPEND_ONLY = (
    "Las actuaciones sólo admiten agregar entradas al final del historial."
)
_MSG_ARCHIVO_INVALID = "El archivo indicado no existe o pertenece a otro caso."


class UpdateCaseUseCase:
    def __init__(
        self,
        repository: CaseRepository,
        *,
        intake: AttachmentIntake | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._cases = repository
        self._intake = intake
        self._now = now

    def execute(
        self,
        case_id: str | UUID,
        changes: Mapping[str, Any],
        acting_user: str | None = None,
    ) -> CaseResult:
        parsed_id, id_error = parse_case_id(case_id)
        if id_error is not None:
            return CaseResult(error=id_error)

        # Sólo campos editables: el resto (id, estado, fechas de sistema) se ignora.
        editable = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        values, errors = normalize_case_fields(editable, partial=True)
        if errors:
            return case_error(
                CaseErrorCode.VALIDATION_ERROR, summarize_errors(errors), errors=errors
            )

        current = self._cases.get_case(parsed_id)
        if current is None:
            return not_found_result()

        actor = (acting_user or "").strip() or DEFAULT_ACTOR
        now = self._now()

        new_actuaciones: List[Actuacion] = []
        if changes.get("actuaciones") is not None:
            tail, tail_error = self._actuaciones_tail(
                current.actuaciones, changes["actuaciones"], actor=actor, now=now
            )
            if tail_error is not None:
                return case_error(CaseErrorCode.VALIDATION_ERROR, tail_error)
            new_actuaciones = tail

        changed = {
            attr: value for attr, value in values.items() if getattr(current, attr) != value
        }
        if "archivo" in changed and not self._archivo_available(
            changed["archivo"], parsed_id
        ):
            return case_error(
                CaseErrorCode.VALIDATION_ERROR,
                _MSG_ARCHIVO_INVALID,
                errors=[{"field": "archivo", "msg": _MSG_ARCHIVO_INVALID}],
            )

        modificaciones = [
            Modificacion.record(
                EDITABLE_FIELDS[attr],
                getattr(current, attr),
                value,
                fecha=now,
                usuario=actor,
            )
            for attr, value in changed.items()
        ]

        if not changed and not new_actuaciones:
            return CaseResult(case=current)

        try:
            updated = self._cases.update_case_fields(
                parsed_id,
                changed,
                modificaciones=modificaciones,
                actuaciones=new_actuaciones,
            )
        except UniqueConstraintError:
            return case_error(
                CaseErrorCode.CONFLICT, "El código personalizado ya está en uso."
            )
        if updated is None:
            return not_found_result()
        return CaseResult(case=updated)

    # =========================================================================
    # Helpers
    # =========================================================================
    def _archivo_available(self, archivo: str, case_id: UUID) -> bool:
        if self._intake is None or not self._intake.exists(archivo):
            return False
        return not self._cases.archivo_in_use(archivo, exclude_id=case_id)

    @staticmethod
    def _same(existing: Actuacion, entry: Mapping[str, Any]) -> bool:
        return (
            existing.descripcion == entry.get("descripcion")
            and existing.fecha == _parse_timestamp(entry.get("fecha"))
            and existing.usuario == (entry.get("usuario") or DEFAULT_ACTOR)
        )

    def _actuaciones_tail(
        self,
        existing: List[Actuacion],
        submitted: Iterable[Any],
        *,
        actor: str,
        now: datetime,
    ) -> Tuple[List[Actuacion], str | None]:
        entries = [self._as_mapping(item) for item in submitted]
        if len(entries) < len(existing):
            return [], _MSG_APPEND_ONLY
        for current, entry in zip(existing, entries):
            if not self._same(current, entry):
                return [], _MSG_APPEND_ONLY

        tail: List[Actuacion] = []
        for entry in entries[len(existing):]:
            descripcion = str(entry.get("descripcion") or "").strip()
            if not descripcion:
                return [], "Cada actuación requiere una descripción."
            fecha = _parse_timestamp(entry.get("fecha"))
            if fecha is False:
                return [], "Fecha de actuación inválida."
            tail.append(
                Actuacion(
                    descripcion=descripcion,
                    fecha=fecha or now,
                    usuario=str(entry.get("usuario") or "").strip() or actor,
                )
            )
        return tail, None

    @staticmethod
    def _as_mapping(item: Any) -> Mapping[str, Any]:
        if isinstance(item, Actuacion):
            return {
                "descripcion": item.descripcion,
                "fecha": item.fecha,
                "usuario": item.usuario,
            }
        if isinstance(item, Mapping):
            return item
        return {}


def _parse_timestamp(value: Any) -> datetime | None | bool:
    """datetime | ISO 8601 -> datetime; None si falta; False si es inválido."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return False
    return False
