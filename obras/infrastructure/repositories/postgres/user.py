"""
============================================================
TARJETA CRC: infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios por username (login / lookup).
  - Listar usuarios (orden determinístico).
  - Crear usuarios; la constraint uq_users_username es la guardia autoritativa
    de unicidad (UniqueViolation -> UniqueConstraintError).
  - Mapear filas crudas -> entidad `User` validando `UserRole`.

Collaborators:
  - PostgresRepositoryBase (pool + ejecución + errores)
  - identity.users.User / UserRole

Constraints / Notes:
  - Retorna None cuando no existe el recurso (no exception por “not found”).
  - Rol persistido fuera del enum -> DatabaseError (drift de datos).
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import uuid4

from ....crosscutting.exceptions import DatabaseError
from ....identity.users import User, UserRole
from .base import PostgresRepositoryBase

# R: Lista explícita de columnas (contrato con migraciones).
_USER_COLUMNS = "id, name, username, password_hash, role, created_at"

_USER_ORDER_BY = "created_at DESC, id DESC"


def _row_to_user(row: dict[str, Any]) -> User:
    try:
        role = UserRole(row["role"])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row['role']}") from exc

    return User(
        id=row["id"],
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=role,
        created_at=row["created_at"],
    )


class PostgresUserRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del repositorio de usuarios."""

    def get_user_by_username(self, username: str) -> Optional[User]:
        row = self._fetchone(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE username = %s
            """,
            params=(username,),
            context_msg="PostgresUserRepository: get_user_by_username failed",
            extra={"username": username},
        )
        return _row_to_user(row) if row else None

    def list_users(self) -> list[User]:
        rows = self._fetchall(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                ORDER BY {_USER_ORDER_BY}
            """,
            context_msg="PostgresUserRepository: list_users failed",
            extra={},
        )
        return [_row_to_user(r) for r in rows]

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password_hash: str,
        role: UserRole,
    ) -> User:
        user_id = uuid4()

        row = self._fetchone(
            query=f"""
                INSERT INTO users (id, name, username, password_hash, role)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING {_USER_COLUMNS}
            """,
            params=(user_id, name, username, password_hash, role.value),
            context_msg="PostgresUserRepository: create_user failed",
            extra={"user_id": str(user_id), "username": username, "role": role.value},
        )

        if not row:
            raise DatabaseError(
                "PostgresUserRepository: create_user failed (no row returned)"
            )

        return _row_to_user(row)
