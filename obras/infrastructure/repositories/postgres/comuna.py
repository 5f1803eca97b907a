"""
============================================================
TARJETA CRC: infrastructure/repositories/postgres/comuna.py
============================================================
Class: PostgresComunaRepository

Responsibilities:
- Persistir el catálogo de comunas (consejos comunales como JSONB).
- Listar comunas por parroquia y comunas no referenciadas por casos.

Collaborators:
- domain.entities.Comuna, ConsejoComunal
- PostgresRepositoryBase
- Tabla: comunas
============================================================
"""

from __future__ import annotations

from typing import Any, Dict, List

from psycopg.types.json import Jsonb

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import Comuna, ConsejoComunal
from .base import PostgresRepositoryBase

_SELECT_COLUMNS = (
    "id, nombre, codigo_circuito_comunal, parroquia, consejos_comunales, "
    "created_at, updated_at"
)
_ORDER_BY = "ORDER BY nombre ASC, id ASC"


def _row_to_comuna(row: Dict[str, Any]) -> Comuna:
    return Comuna(
        id=row["id"],
        nombre=row["nombre"],
        codigo_circuito_comunal=row["codigo_circuito_comunal"],
        parroquia=row["parroquia"],
        consejos_comunales=[
            ConsejoComunal.from_dict(c) for c in row["consejos_comunales"] or []
        ],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class PostgresComunaRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del catálogo de comunas."""

    def create_comuna(self, comuna: Comuna) -> Comuna:
        row = self._fetchone(
            query=f"""
                INSERT INTO comunas (
                    id, nombre, codigo_circuito_comunal, parroquia, consejos_comunales
                )
                VALUES (%s, %s, %s, %s, %s)
                RETURNING {_SELECT_COLUMNS}
            """,
            params=(
                comuna.id,
                comuna.nombre,
                comuna.codigo_circuito_comunal,
                comuna.parroquia,
                Jsonb([c.to_dict() for c in comuna.consejos_comunales]),
            ),
            context_msg="PostgresComunaRepository: Failed to create comuna",
            extra={"comuna_id": str(comuna.id), "nombre": comuna.nombre},
        )
        if not row:
            raise DatabaseError(
                "PostgresComunaRepository: Failed to create comuna: no row returned"
            )
        return _row_to_comuna(row)

    def list_comunas_by_parroquia(self, parroquia: str) -> List[Comuna]:
        rows = self._fetchall(
            query=f"""
                SELECT {_SELECT_COLUMNS}
                FROM comunas
                WHERE parroquia = %s
                {_ORDER_BY}
            """,
            params=(parroquia,),
            context_msg="PostgresComunaRepository: Failed to list by parroquia",
            extra={"parroquia": parroquia},
        )
        return [_row_to_comuna(r) for r in rows]

    def list_comunas_excluding(self, nombres: List[str]) -> List[Comuna]:
        # R: Con array vacío, NOT (x = ANY('{}')) es TRUE => devuelve todas.
        rows = self._fetchall(
            query=f"""
                SELECT {_SELECT_COLUMNS}
                FROM comunas
                WHERE NOT (nombre = ANY(%s::text[]))
                {_ORDER_BY}
            """,
            params=(list(nombres),),
            context_msg="PostgresComunaRepository: Failed to list uncontacted comunas",
            extra={"excluded": len(nombres)},
        )
        return [_row_to_comuna(r) for r in rows]
