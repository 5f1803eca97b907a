from .find_user import FindUserUseCase, ListUsersUseCase
from .register_user import RegisterUserInput, RegisterUserUseCase
from .user_results import (
    INVALID_CREDENTIALS_MESSAGE,
    UserError,
    UserErrorCode,
    UserResult,
)
from .verify_credentials import VerifyCredentialsUseCase

__all__ = [
    "FindUserUseCase",
    "INVALID_CREDENTIALS_MESSAGE",
    "ListUsersUseCase",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "UserError",
    "UserErrorCode",
    "UserResult",
    "VerifyCredentialsUseCase",
]
