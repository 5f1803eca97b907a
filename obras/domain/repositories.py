"""
CRC: domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- domain.entities: Case, Actuacion, Modificacion, Comuna, ParroquiaCount
- identity.users: User, UserRole
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Writes that touch a case and its logs are a single atomic operation.
- Uniqueness violations raise crosscutting.exceptions.UniqueConstraintError.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- "Not found" is signalled with None, never with an exception.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from ..identity.users import User, UserRole
from .entities import (
    Actuacion,
    Case,
    CaseStatus,
    Comuna,
    Modificacion,
    ParroquiaCount,
)


class UserRepository(Protocol):
    """
    R: Interface for user persistence.

    Storage MUST enforce username uniqueness (authoritative guard) and raise
    UniqueConstraintError on violation.
    """

    def get_user_by_username(self, username: str) -> Optional[User]: ...

    def list_users(self) -> List[User]: ...

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password_hash: str,
        role: UserRole,
    ) -> User: ...


class CaseRepository(Protocol):
    """
    R: Interface for case persistence.

    Ordering: listados siempre created_at DESC (más nuevos primero).
    """

    def ping(self) -> bool: ...

    def create_case(self, case: Case) -> Case: ...

    def get_case(self, case_id: UUID) -> Optional[Case]: ...

    def list_cases(
        self, *, limit: Optional[int] = None, offset: int = 0
    ) -> List[Case]: ...

    def count_cases(self) -> int: ...

    def update_case_fields(
        self,
        case_id: UUID,
        fields: Dict[str, Any],
        *,
        modificaciones: List[Modificacion],
        actuaciones: List[Actuacion],
    ) -> Optional[Case]:
        """Setea campos y agrega entradas de bitácora en una sola escritura."""
        ...

    def update_case_status(
        self,
        case_id: UUID,
        *,
        expected: CaseStatus,
        new_status: CaseStatus,
        modificacion: Modificacion,
    ) -> Optional[Case]:
        """
        Compare-and-set: sólo escribe si el estado actual == expected.

        Devuelve None si el caso no existe o si el estado cambió en el medio.
        """
        ...

    def mark_case_delivered(
        self,
        case_id: UUID,
        *,
        fecha_entrega: date,
        actuacion: Actuacion,
    ) -> Optional[Case]: ...

    def append_actuacion(
        self, case_id: UUID, actuacion: Actuacion
    ) -> Optional[Case]: ...

    def delete_case(self, case_id: UUID) -> Optional[Case]:
        """Elimina y devuelve el último snapshot (None si no existía)."""
        ...

    def count_cases_by_parroquia(self) -> List[ParroquiaCount]: ...

    def list_case_comunas(self) -> List[str]:
        """Nombres distintos de comuna referenciados por casos."""
        ...

    def archivo_in_use(
        self, archivo: str, *, exclude_id: Optional[UUID] = None
    ) -> bool:
        """True si algún caso (distinto de exclude_id) apunta a ese adjunto."""
        ...


class ComunaRepository(Protocol):
    """R: Interface for comuna catalog persistence."""

    def create_comuna(self, comuna: Comuna) -> Comuna: ...

    def list_comunas_by_parroquia(self, parroquia: str) -> List[Comuna]: ...

    def list_comunas_excluding(self, nombres: List[str]) -> List[Comuna]: ...
