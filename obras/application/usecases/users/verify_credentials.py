"""
===============================================================================
USE CASE: Verify Credentials (login)
===============================================================================

Responsibilities:
    - Buscar el usuario por username y verificar el password (argon2).
    - Responder SIEMPRE "Credenciales inválidas." ante usuario inexistente o
      password incorrecto (no revelar cuál de las dos mitades falló).
    - Usuario inexistente: verificar igual contra un hash fijo, para que el
      tiempo de respuesta no delate si el username existe.

Collaborators:
    - UserRepository
    - identity.passwords.verify_password / hash_password
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from ....domain.repositories import UserRepository
from ....identity import passwords
from .user_results import (
    INVALID_CREDENTIALS_MESSAGE,
    UserError,
    UserErrorCode,
    UserResult,
)


@lru_cache(maxsize=1)
def _placeholder_hash() -> str:
    return passwords.hash_password("obras-placeholder-credential")


class VerifyCredentialsUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, username: str | None, password: str | None) -> UserResult:
        normalized = (username or "").strip()
        if not normalized or not password:
            return UserResult(
                error=UserError(
                    code=UserErrorCode.VALIDATION_ERROR,
                    message="Usuario y contraseña son obligatorios.",
                )
            )

        user = self._users.get_user_by_username(normalized)
        if user is None:
            passwords.verify_password(password, _placeholder_hash())
            return self._invalid()
        if not passwords.verify_password(password, user.password_hash):
            return self._invalid()

        return UserResult(user=user.to_profile())

    @staticmethod
    def _invalid() -> UserResult:
        return UserResult(
            error=UserError(
                code=UserErrorCode.UNAUTHORIZED,
                message=INVALID_CREDENTIALS_MESSAGE,
            )
        )
