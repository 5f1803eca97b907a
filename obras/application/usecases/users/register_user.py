"""
===============================================================================
USE CASE: Register User
===============================================================================

Business Goal:
    Dar de alta una cuenta con nombre, username único, password y rol.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    RegisterUserUseCase

Responsibilities:
    - Normalizar (strip) nombre y username.
    - Validar campos obligatorios y rol.
    - Verificar unicidad (pre-check) y respetar la guardia autoritativa del
      storage (UNIQUE(username) -> UniqueConstraintError -> CONFLICT).
    - Hashear el password ANTES de persistir.
    - Devolver UserProfile (nunca el hash).

Collaborators:
    - UserRepository
    - identity.passwords.hash_password
    - user_results
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ....crosscutting.exceptions import UniqueConstraintError
from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from ....identity.passwords import hash_password
from ....identity.users import UserRole
from .user_results import UserError, UserErrorCode, UserResult

_MSG_USERNAME_TAKEN = "El nombre de usuario ya existe."


@dataclass(frozen=True)
class RegisterUserInput:
    name: str | None
    username: str | None
    password: str | None
    role: str | None


class RegisterUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, input_data: RegisterUserInput) -> UserResult:
        name = (input_data.name or "").strip()
        username = (input_data.username or "").strip()
        password = input_data.password or ""

        if not name or not username or not password.strip():
            return self._error(
                UserErrorCode.VALIDATION_ERROR,
                "Nombre, usuario y contraseña son obligatorios.",
            )

        role = self._parse_role(input_data.role)
        if role is None:
            return self._error(
                UserErrorCode.VALIDATION_ERROR,
                "Rol inválido (superadmin, admin o user).",
            )

        if self._users.get_user_by_username(username) is not None:
            return self._error(UserErrorCode.CONFLICT, _MSG_USERNAME_TAKEN)

        try:
            created = self._users.create_user(
                name=name,
                username=username,
                password_hash=hash_password(password),
                role=role,
            )
        except UniqueConstraintError:
            # Carrera entre dos registros concurrentes: gana el primero.
            return self._error(UserErrorCode.CONFLICT, _MSG_USERNAME_TAKEN)

        logger.info(
            "Usuario registrado",
            extra={"username": created.username, "role": created.role.value},
        )
        return UserResult(user=created.to_profile())

    @staticmethod
    def _parse_role(raw: str | None) -> UserRole | None:
        try:
            # Los roles se comparan exactos: "ADMIN" no es "admin".
            return UserRole((raw or "").strip())
        except ValueError:
            return None

    @staticmethod
    def _error(code: UserErrorCode, message: str) -> UserResult:
        return UserResult(error=UserError(code=code, message=message))
