"""
============================================================
TARJETA CRC: infrastructure/repositories/in_memory/case.py
============================================================
Class: InMemoryCaseRepository

Responsibilities:
  - Almacenar casos en memoria (tests / local dev).
  - Replicar la semántica del repo Postgres:
      * compare-and-set en el cambio de estado
      * bitácoras append-only
      * unicidad de codigo_personalizado
      * ordering created_at DESC (desempate: inserción más reciente primero)

Collaborators:
  - domain.entities.Case, CaseStatus, Actuacion, Modificacion, ParroquiaCount
  - domain.repositories.CaseRepository (contrato a implementar)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Copias defensivas: nunca se comparten listas mutables con los callers.
============================================================
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import date, datetime, timezone
from itertools import count
from threading import Lock
from typing import Any, Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import UniqueConstraintError
from ....domain.entities import (
    EDITABLE_FIELDS,
    Actuacion,
    Case,
    CaseStatus,
    Modificacion,
    ParroquiaCount,
)
from ....domain.repositories import CaseRepository


def _copy(case: Case) -> Case:
    return replace(
        case,
        actuaciones=list(case.actuaciones),
        modificaciones=list(case.modificaciones),
    )


class InMemoryCaseRepository(CaseRepository):
    """Repositorio in-memory, thread-safe, para Casos."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._cases: Dict[UUID, Case] = {}
        self._sequence: Dict[UUID, int] = {}
        self._counter = count()

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _now() -> datetime:
        """R: Fuente única de tiempo (UTC)."""
        return datetime.now(timezone.utc)

    def _sorted(self) -> List[Case]:
        return sorted(
            self._cases.values(),
            key=lambda c: (c.created_at, self._sequence[c.id]),
            reverse=True,
        )

    def _check_codigo_unique(self, codigo: Optional[str], case_id: UUID) -> None:
        if not codigo:
            return
        for other in self._cases.values():
            if other.id != case_id and other.codigo_personalizado == codigo:
                raise UniqueConstraintError(
                    "InMemoryCaseRepository: duplicate codigo_personalizado",
                    constraint="uq_casos_codigo_personalizado",
                )

    # =========================================================
    # API del repositorio
    # =========================================================
    def ping(self) -> bool:
        return True

    def create_case(self, case: Case) -> Case:
        with self._lock:
            if case.id in self._cases:
                raise UniqueConstraintError(
                    "InMemoryCaseRepository: duplicate id", constraint="pk_casos"
                )
            self._check_codigo_unique(case.codigo_personalizado, case.id)
            now = self._now()
            stored = replace(_copy(case), created_at=now, updated_at=now)
            self._cases[case.id] = stored
            self._sequence[case.id] = next(self._counter)
            return _copy(stored)

    def get_case(self, case_id: UUID) -> Optional[Case]:
        with self._lock:
            case = self._cases.get(case_id)
            return _copy(case) if case else None

    def list_cases(
        self, *, limit: Optional[int] = None, offset: int = 0
    ) -> List[Case]:
        with self._lock:
            items = self._sorted()
        start = max(offset, 0)
        end = None if limit is None else start + max(limit, 0)
        return [_copy(c) for c in items[start:end]]

    def count_cases(self) -> int:
        with self._lock:
            return len(self._cases)

    def update_case_fields(
        self,
        case_id: UUID,
        fields: Dict[str, Any],
        *,
        modificaciones: List[Modificacion],
        actuaciones: List[Actuacion],
    ) -> Optional[Case]:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Campos no editables: {sorted(unknown)}")

        with self._lock:
            current = self._cases.get(case_id)
            if current is None:
                return None
            if "codigo_personalizado" in fields:
                self._check_codigo_unique(fields["codigo_personalizado"], case_id)
            updated = replace(
                current,
                **fields,
                actuaciones=[*current.actuaciones, *actuaciones],
                modificaciones=[*current.modificaciones, *modificaciones],
                updated_at=self._now(),
            )
            self._cases[case_id] = updated
            return _copy(updated)

    def update_case_status(
        self,
        case_id: UUID,
        *,
        expected: CaseStatus,
        new_status: CaseStatus,
        modificacion: Modificacion,
    ) -> Optional[Case]:
        with self._lock:
            current = self._cases.get(case_id)
            if current is None or current.estado != expected:
                return None
            updated = replace(
                current,
                estado=new_status,
                actuaciones=list(current.actuaciones),
                modificaciones=[*current.modificaciones, modificacion],
                updated_at=self._now(),
            )
            self._cases[case_id] = updated
            return _copy(updated)

    def mark_case_delivered(
        self,
        case_id: UUID,
        *,
        fecha_entrega: date,
        actuacion: Actuacion,
    ) -> Optional[Case]:
        with self._lock:
            current = self._cases.get(case_id)
            if current is None:
                return None
            updated = replace(
                current,
                estado=CaseStatus.ENTREGADO,
                fecha_entrega=fecha_entrega,
                actuaciones=[*current.actuaciones, actuacion],
                modificaciones=list(current.modificaciones),
                updated_at=self._now(),
            )
            self._cases[case_id] = updated
            return _copy(updated)

    def append_actuacion(self, case_id: UUID, actuacion: Actuacion) -> Optional[Case]:
        return self.update_case_fields(
            case_id, {}, modificaciones=[], actuaciones=[actuacion]
        )

    def delete_case(self, case_id: UUID) -> Optional[Case]:
        with self._lock:
            removed = self._cases.pop(case_id, None)
            self._sequence.pop(case_id, None)
            return _copy(removed) if removed else None

    def count_cases_by_parroquia(self) -> List[ParroquiaCount]:
        with self._lock:
            counts = Counter(c.parroquia for c in self._cases.values())
        return [
            ParroquiaCount(parroquia=p, count=n) for p, n in sorted(counts.items())
        ]

    def list_case_comunas(self) -> List[str]:
        with self._lock:
            return sorted({c.comuna for c in self._cases.values()})

    def archivo_in_use(
        self, archivo: str, *, exclude_id: Optional[UUID] = None
    ) -> bool:
        with self._lock:
            return any(
                c.archivo == archivo and c.id != exclude_id
                for c in self._cases.values()
            )
