"""
============================================================
TARJETA CRC: infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Enforzar unicidad de username igual que uq_users_username en Postgres.

Collaborators:
  - identity.users.User / UserRole
  - domain.repositories.UserRepository
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import uuid4

from ....crosscutting.exceptions import UniqueConstraintError
from ....domain.repositories import UserRepository
from ....identity.users import User, UserRole


class InMemoryUserRepository(UserRepository):
    """Repositorio in-memory, thread-safe, indexado por username."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[str, User] = {}

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return self._users.get(username)

    def list_users(self) -> List[User]:
        with self._lock:
            # Mismo orden que Postgres: más recientes primero.
            return list(reversed(list(self._users.values())))

    def create_user(
        self,
        *,
        name: str,
        username: str,
        password_hash: str,
        role: UserRole,
    ) -> User:
        with self._lock:
            if username in self._users:
                raise UniqueConstraintError(
                    "InMemoryUserRepository: duplicate username",
                    constraint="uq_users_username",
                )
            user = User(
                id=uuid4(),
                name=name,
                username=username,
                password_hash=password_hash,
                role=role,
                created_at=datetime.now(timezone.utc),
            )
            self._users[username] = user
            return user
