"""
USE CASES: Find User / List Users (queries de solo lectura).

Ambos devuelven UserProfile: el hash nunca sale de la capa de aplicación.
"""

from __future__ import annotations

from typing import List

from ....domain.repositories import UserRepository
from ....identity.users import UserProfile


class FindUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, username: str | None) -> UserProfile | None:
        normalized = (username or "").strip()
        if not normalized:
            return None
        user = self._users.get_user_by_username(normalized)
        return user.to_profile() if user else None


class ListUsersUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self) -> List[UserProfile]:
        return [user.to_profile() for user in self._users.list_users()]
