# obras/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ObrasError + subclases

Responsabilidades:
  - Estandarizar errores de infraestructura que luego se mapean a HTTP
  - Distinguir violaciones de unicidad (409) de fallas genéricas de DB (500 genérico)
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/repositories/* (lanzan DatabaseError / UniqueConstraintError)
  - application/usecases/* (capturan UniqueConstraintError -> CONFLICT)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class ObrasError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      ObrasError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "OBRAS_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(ObrasError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class UniqueConstraintError(DatabaseError):
    """
    Violación de una restricción UNIQUE (guardia autoritativa de unicidad).

    `constraint` lleva el nombre de la constraint (ej: uq_users_username).
    """

    error_code: str = "CONFLICT"

    def __init__(
        self,
        message: str,
        *,
        constraint: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.constraint = constraint
