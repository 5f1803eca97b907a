"""
===============================================================================
CRC CARD: infrastructure/db/pool.py
===============================================================================

Un único psycopg_pool.ConnectionPool por proceso, abierto en el lifespan de la
API y cerrado al apagar. Los repositorios Postgres lo piden con get_pool().

Cada conexión arranca con statement_timeout (DB_STATEMENT_TIMEOUT_MS) vía el
parámetro `options` de libpq; 0 lo deja sin límite.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - api/main.py (init_pool / close_pool)
  - infrastructure/repositories/postgres/base.py (get_pool)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError


def _session_options(statement_timeout_ms: int) -> dict[str, str]:
    if statement_timeout_ms <= 0:
        return {}
    return {"options": f"-c statement_timeout={statement_timeout_ms}"}


class _PoolSlot:
    """Guarda el pool del proceso; todas las transiciones bajo un lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pool: Optional[ConnectionPool] = None

    def open(self, **pool_kwargs) -> ConnectionPool:
        with self._lock:
            if self._pool is not None:
                raise PoolAlreadyInitializedError("El pool ya fue inicializado.")
            self._pool = ConnectionPool(open=True, **pool_kwargs)
            return self._pool

    def current(self) -> ConnectionPool:
        pool = self._pool
        if pool is None:
            raise PoolNotInitializedError(
                "Pool no inicializado. Llamar init_pool() primero."
            )
        return pool

    def take(self) -> Optional[ConnectionPool]:
        with self._lock:
            pool, self._pool = self._pool, None
            return pool


_slot = _PoolSlot()


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    statement_timeout_ms: int | None = None,
) -> ConnectionPool:
    if statement_timeout_ms is None:
        from ...crosscutting.config import get_settings

        statement_timeout_ms = int(get_settings().db_statement_timeout_ms)

    pool = _slot.open(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        kwargs=_session_options(statement_timeout_ms),
    )
    logger.info(
        "Pool DB abierto",
        extra={
            "min_size": min_size,
            "max_size": max_size,
            "statement_timeout_ms": statement_timeout_ms,
        },
    )
    return pool


def get_pool() -> ConnectionPool:
    return _slot.current()


def close_pool() -> None:
    """Idempotente; un error al cerrar se propaga, pero el slot queda libre."""
    pool = _slot.take()
    if pool is not None:
        pool.close()
        logger.info("Pool DB cerrado")


def reset_pool() -> None:
    """Para tests: libera el slot aunque el cierre falle (queda en el log)."""
    pool = _slot.take()
    if pool is None:
        return
    try:
        pool.close()
    except Exception:
        logger.warning("reset_pool: error cerrando pool", exc_info=True)
