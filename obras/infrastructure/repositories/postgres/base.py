"""
============================================================
TARJETA CRC: infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Resolver el pool (inyectado o global) de forma lazy.
  - Ejecutar SQL parametrizado con manejo de errores consistente:
      * UniqueViolation -> UniqueConstraintError (409 arriba)
      * cualquier otra falla -> DatabaseError (con logging estructurado)
  - Devolver filas como dict (psycopg.rows.dict_row).

Collaborators:
  - psycopg / psycopg_pool.ConnectionPool
  - infrastructure.db.pool.get_pool
  - crosscutting.exceptions (DatabaseError, UniqueConstraintError)
  - crosscutting.logger.logger

Constraints:
  - SQL parametrizado siempre (nunca interpolar input de usuario).
  - Cada llamada es una transacción (commit al salir de pool.connection()).
============================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from psycopg import errors as pg_errors
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, UniqueConstraintError
from ....crosscutting.logger import logger


class PostgresRepositoryBase:
    """R: Helpers compartidos por los repositorios PostgreSQL."""

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Pool inyectable para tests; en producción se obtiene por factory global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def _run(
        self,
        *,
        query: str,
        params: Iterable[object],
        context_msg: str,
        extra: dict[str, Any],
        fetch: str,
    ) -> Any:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, tuple(params))
                    if fetch == "one":
                        return cur.fetchone()
                    if fetch == "all":
                        return cur.fetchall()
                    return cur.rowcount
        except pg_errors.UniqueViolation as exc:
            constraint = getattr(exc.diag, "constraint_name", None)
            logger.warning(
                context_msg,
                extra={**extra, "constraint": constraint},
            )
            raise UniqueConstraintError(
                f"{context_msg}: unique violation",
                constraint=constraint,
                original_error=exc,
            ) from exc
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def _fetchone(
        self,
        *,
        query: str,
        params: Iterable[object],
        context_msg: str,
        extra: dict[str, Any],
    ) -> dict[str, Any] | None:
        return self._run(
            query=query, params=params, context_msg=context_msg, extra=extra, fetch="one"
        )

    def _fetchall(
        self,
        *,
        query: str,
        params: Iterable[object] = (),
        context_msg: str,
        extra: dict[str, Any],
    ) -> list[dict[str, Any]]:
        return self._run(
            query=query, params=params, context_msg=context_msg, extra=extra, fetch="all"
        )

    def ping(self) -> bool:
        """Chequeo de conectividad para /readyz."""
        row = self._fetchone(
            query="SELECT 1 AS ok",
            params=(),
            context_msg=f"{type(self).__name__}: ping failed",
            extra={},
        )
        return bool(row and row["ok"] == 1)
