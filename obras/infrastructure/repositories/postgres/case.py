"""
============================================================
TARJETA CRC: infrastructure/repositories/postgres/case.py
============================================================
Class: PostgresCaseRepository

Responsibilities:
- Implementar acceso a datos de Casos en PostgreSQL (SQL crudo).
- Persistir las bitácoras (actuaciones / modificaciones) como arrays JSONB
  dentro de la misma fila: un cambio y su entrada de auditoría son UNA escritura.
- Cambio de estado con compare-and-set (WHERE estado = esperado).
- Listados determinísticos (created_at DESC, id DESC) y agregados simples.

Collaborators:
- domain.entities.Case, CaseStatus, Actuacion, Modificacion, ParroquiaCount
- PostgresRepositoryBase
- psycopg.types.json.Jsonb
- Tabla: casos

Constraints / Notes:
- Sin lógica de negocio aquí (transiciones permitidas, secretos, etc. viven arriba).
- Las columnas editables salen de una whitelist (nunca de input del usuario).
- Append con `||`: jamás se reescribe ni reordena una bitácora.
============================================================
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from psycopg.types.json import Jsonb

from ....crosscutting.exceptions import DatabaseError
from ....domain.entities import (
    EDITABLE_FIELDS,
    Actuacion,
    Case,
    CaseStatus,
    Modificacion,
    ParroquiaCount,
)
from .base import PostgresRepositoryBase

# R: Columnas escalares (mismo nombre que los atributos de Case).
_SCALAR_COLUMNS = (
    "id",
    "tipo_obra",
    "nombre_obra",
    "parroquia",
    "circuito",
    "eje",
    "comuna",
    "codigo_comuna",
    "name_jc",
    "name_ju",
    "enlace_comunal",
    "case_description",
    "case_date",
    "archivo",
    "ente_responsable",
    "cantidad_consejos_comunales",
    "consejo_comunal_ejecuta",
    "cantidad_familiares",
    "direccion_exacta",
    "responsable_sala_autogobierno",
    "jefe_calle",
    "jefe_politico_eje",
    "jefe_juventud_circuito_comunal",
    "codigo_personalizado",
    "fecha_entrega",
    "created_at",
    "updated_at",
)

_SELECT_COLUMNS = ", ".join(
    (*_SCALAR_COLUMNS, "estado", "actuaciones", "modificaciones")
)

_ORDER_BY = "ORDER BY created_at DESC, id DESC"

# R: Columnas que INSERT escribe explícitamente (created_at/updated_at por DEFAULT).
_INSERT_COLUMNS = tuple(
    c for c in _SCALAR_COLUMNS if c not in {"created_at", "updated_at"}
)


def _row_to_case(row: Dict[str, Any]) -> Case:
    try:
        estado = CaseStatus(row["estado"])
    except ValueError as exc:
        raise DatabaseError(f"Invalid case status in database: {row['estado']}") from exc

    return Case(
        **{c: row[c] for c in _SCALAR_COLUMNS},
        estado=estado,
        actuaciones=[Actuacion.from_dict(a) for a in row["actuaciones"] or []],
        modificaciones=[Modificacion.from_dict(m) for m in row["modificaciones"] or []],
    )


class PostgresCaseRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del repositorio de Casos."""

    # =========================================================
    # Lecturas
    # =========================================================
    def get_case(self, case_id: UUID) -> Optional[Case]:
        row = self._fetchone(
            query=f"SELECT {_SELECT_COLUMNS} FROM casos WHERE id = %s",
            params=(case_id,),
            context_msg="PostgresCaseRepository: Failed to get case",
            extra={"case_id": str(case_id)},
        )
        return _row_to_case(row) if row else None

    def list_cases(
        self, *, limit: Optional[int] = None, offset: int = 0
    ) -> List[Case]:
        params: list[object] = []
        paging = ""
        if limit is not None:
            paging = "LIMIT %s OFFSET %s"
            params.extend([max(limit, 0), max(offset, 0)])

        rows = self._fetchall(
            query=f"""
                SELECT {_SELECT_COLUMNS}
                FROM casos
                {_ORDER_BY}
                {paging}
            """,
            params=params,
            context_msg="PostgresCaseRepository: Failed to list cases",
            extra={"limit": limit, "offset": offset},
        )
        return [_row_to_case(r) for r in rows]

    def count_cases(self) -> int:
        row = self._fetchone(
            query="SELECT COUNT(*) AS total FROM casos",
            params=(),
            context_msg="PostgresCaseRepository: Failed to count cases",
            extra={},
        )
        return int(row["total"]) if row else 0

    def count_cases_by_parroquia(self) -> List[ParroquiaCount]:
        rows = self._fetchall(
            query="""
                SELECT parroquia, COUNT(*) AS count
                FROM casos
                GROUP BY parroquia
                ORDER BY parroquia ASC
            """,
            context_msg="PostgresCaseRepository: Failed to aggregate by parroquia",
            extra={},
        )
        return [ParroquiaCount(parroquia=r["parroquia"], count=int(r["count"])) for r in rows]

    def list_case_comunas(self) -> List[str]:
        rows = self._fetchall(
            query="SELECT DISTINCT comuna FROM casos ORDER BY comuna ASC",
            context_msg="PostgresCaseRepository: Failed to list case comunas",
            extra={},
        )
        return [r["comuna"] for r in rows]

    def archivo_in_use(
        self, archivo: str, *, exclude_id: Optional[UUID] = None
    ) -> bool:
        row = self._fetchone(
            query="""
                SELECT EXISTS (
                    SELECT 1 FROM casos
                    WHERE archivo = %s
                      AND (%s::uuid IS NULL OR id <> %s::uuid)
                ) AS in_use
            """,
            params=(archivo, exclude_id, exclude_id),
            context_msg="PostgresCaseRepository: Failed to check attachment usage",
            extra={"archivo": archivo},
        )
        return bool(row and row["in_use"])

    # =========================================================
    # Escrituras
    # =========================================================
    def create_case(self, case: Case) -> Case:
        placeholders = ", ".join(["%s"] * (len(_INSERT_COLUMNS) + 3))
        row = self._fetchone(
            query=f"""
                INSERT INTO casos ({", ".join(_INSERT_COLUMNS)}, estado, actuaciones, modificaciones)
                VALUES ({placeholders})
                RETURNING {_SELECT_COLUMNS}
            """,
            params=[
                *(getattr(case, c) for c in _INSERT_COLUMNS),
                case.estado.value,
                Jsonb([a.to_dict() for a in case.actuaciones]),
                Jsonb([m.to_dict() for m in case.modificaciones]),
            ],
            context_msg="PostgresCaseRepository: Failed to create case",
            extra={"case_id": str(case.id)},
        )
        if not row:
            raise DatabaseError(
                "PostgresCaseRepository: Failed to create case: no row returned"
            )
        return _row_to_case(row)

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

        sets: list[str] = []
        params: list[object] = []

        # R: Orden estable (whitelist) para que el SQL sea determinístico.
        for column in EDITABLE_FIELDS:
            if column in fields:
                sets.append(f"{column} = %s")
                params.append(fields[column])

        if modificaciones:
            sets.append("modificaciones = modificaciones || %s")
            params.append(Jsonb([m.to_dict() for m in modificaciones]))

        if actuaciones:
            sets.append("actuaciones = actuaciones || %s")
            params.append(Jsonb([a.to_dict() for a in actuaciones]))

        if not sets:
            return self.get_case(case_id)

        sets.append("updated_at = NOW()")
        params.append(case_id)

        row = self._fetchone(
            query=f"""
                UPDATE casos
                SET {", ".join(sets)}
                WHERE id = %s
                RETURNING {_SELECT_COLUMNS}
            """,
            params=params,
            context_msg="PostgresCaseRepository: Failed to update case",
            extra={"case_id": str(case_id), "fields": sorted(fields)},
        )
        return _row_to_case(row) if row else None

    def update_case_status(
        self,
        case_id: UUID,
        *,
        expected: CaseStatus,
        new_status: CaseStatus,
        modificacion: Modificacion,
    ) -> Optional[Case]:
        row = self._fetchone(
            query=f"""
                UPDATE casos
                SET estado = %s,
                    modificaciones = modificaciones || %s,
                    updated_at = NOW()
                WHERE id = %s AND estado = %s
                RETURNING {_SELECT_COLUMNS}
            """,
            params=(
                new_status.value,
                Jsonb([modificacion.to_dict()]),
                case_id,
                expected.value,
            ),
            context_msg="PostgresCaseRepository: Failed to update case status",
            extra={
                "case_id": str(case_id),
                "expected": expected.value,
                "new_status": new_status.value,
            },
        )
        return _row_to_case(row) if row else None

    def mark_case_delivered(
        self,
        case_id: UUID,
        *,
        fecha_entrega: date,
        actuacion: Actuacion,
    ) -> Optional[Case]:
        row = self._fetchone(
            query=f"""
                UPDATE casos
                SET estado = %s,
                    fecha_entrega = %s,
                    actuaciones = actuaciones || %s,
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {_SELECT_COLUMNS}
            """,
            params=(
                CaseStatus.ENTREGADO.value,
                fecha_entrega,
                Jsonb([actuacion.to_dict()]),
                case_id,
            ),
            context_msg="PostgresCaseRepository: Failed to mark case delivered",
            extra={"case_id": str(case_id)},
        )
        return _row_to_case(row) if row else None

    def append_actuacion(self, case_id: UUID, actuacion: Actuacion) -> Optional[Case]:
        return self.update_case_fields(
            case_id, {}, modificaciones=[], actuaciones=[actuacion]
        )

    def delete_case(self, case_id: UUID) -> Optional[Case]:
        row = self._fetchone(
            query=f"DELETE FROM casos WHERE id = %s RETURNING {_SELECT_COLUMNS}",
            params=(case_id,),
            context_msg="PostgresCaseRepository: Failed to delete case",
            extra={"case_id": str(case_id)},
        )
        return _row_to_case(row) if row else None
