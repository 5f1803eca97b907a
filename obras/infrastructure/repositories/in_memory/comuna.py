"""
============================================================
TARJETA CRC: infrastructure/repositories/in_memory/comuna.py
============================================================
Class: InMemoryComunaRepository

Responsibilities:
  - Catálogo de comunas en memoria (tests / local dev).
  - Ordering alineado con Postgres: nombre ASC.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List
from uuid import UUID

from ....domain.entities import Comuna
from ....domain.repositories import ComunaRepository


class InMemoryComunaRepository(ComunaRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._comunas: Dict[UUID, Comuna] = {}

    @staticmethod
    def _sorted(items: Iterable[Comuna]) -> List[Comuna]:
        return [
            replace(c, consejos_comunales=list(c.consejos_comunales))
            for c in sorted(items, key=lambda c: (c.nombre, str(c.id)))
        ]

    def create_comuna(self, comuna: Comuna) -> Comuna:
        now = datetime.now(timezone.utc)
        stored = replace(
            comuna,
            consejos_comunales=list(comuna.consejos_comunales),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._comunas[comuna.id] = stored
        return replace(stored, consejos_comunales=list(stored.consejos_comunales))

    def list_comunas_by_parroquia(self, parroquia: str) -> List[Comuna]:
        with self._lock:
            return self._sorted(
                c for c in self._comunas.values() if c.parroquia == parroquia
            )

    def list_comunas_excluding(self, nombres: List[str]) -> List[Comuna]:
        excluded = set(nombres)
        with self._lock:
            return self._sorted(
                c for c in self._comunas.values() if c.nombre not in excluded
            )
