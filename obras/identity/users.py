"""
===============================================================================
TARJETA CRC: identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario

Responsabilidades:
    - Definir el enum de roles de usuario.
    - Definir el dataclass User (registro persistido, con hash).
    - Definir UserProfile: la única forma en que un usuario sale del sistema
      (nunca incluye el hash de la contraseña).

Colaboradores:
    - identity/passwords.py: hashing/verificación.
    - infrastructure/repositories/*/user.py: mapean filas -> User.
    - application/usecases/users: devuelven UserProfile.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles de cuenta soportados."""

    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Vista pública del usuario (sin hash)."""

    id: UUID
    name: str
    username: str
    role: UserRole
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario persistido."""

    id: UUID
    name: str
    username: str
    password_hash: str
    role: UserRole
    created_at: datetime | None = None

    def to_profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            name=self.name,
            username=self.username,
            role=self.role,
            created_at=self.created_at,
        )
