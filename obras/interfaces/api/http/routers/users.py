"""
===============================================================================
TARJETA CRC: interfaces/api/http/routers/users.py
===============================================================================

Responsibilities:
    - POST /users: registro (201).
    - GET /users: según query params
        * username + password -> login (perfil o 401)
        * sólo username       -> búsqueda (perfil o null)
        * sin parámetros      -> listado
    - POST /users/login: login con body JSON.

Collaborators:
    - application.usecases.users
    - error_mapping.raise_user_error
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from .....application.usecases.users import (
    FindUserUseCase,
    ListUsersUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    VerifyCredentialsUseCase,
)
from .....container import (
    get_find_user_use_case,
    get_list_users_use_case,
    get_register_user_use_case,
    get_verify_credentials_use_case,
)
from .....crosscutting.error_responses import validation_error
from .....identity.users import UserProfile
from ..error_mapping import raise_user_error
from ..schemas.users import LoginReq, RegisterUserReq, UserMessageRes, UserRes

router = APIRouter(tags=["users"])


def to_user_res(profile: UserProfile) -> UserRes:
    return UserRes(
        id=profile.id,
        name=profile.name,
        username=profile.username,
        role=profile.role,
        created_at=profile.created_at,
    )


def _dump(profile: UserProfile) -> dict:
    return to_user_res(profile).model_dump(by_alias=True, mode="json")


@router.post("/users", response_model=UserMessageRes, status_code=201)
def register_user(
    req: RegisterUserReq,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    result = use_case.execute(
        RegisterUserInput(
            name=req.name,
            username=req.username,
            password=req.password,
            role=req.role,
        )
    )
    if result.error is not None:
        raise_user_error(result.error)
    return UserMessageRes(
        message="Usuario registrado exitosamente.", user=to_user_res(result.user)
    )


@router.get("/users")
def get_users(
    username: str | None = Query(None),
    password: str | None = Query(None),
    verify: VerifyCredentialsUseCase = Depends(get_verify_credentials_use_case),
    find: FindUserUseCase = Depends(get_find_user_use_case),
    list_all: ListUsersUseCase = Depends(get_list_users_use_case),
):
    if password is not None and username is None:
        raise validation_error("username es obligatorio cuando se envía password.")

    if username is not None and password is not None:
        result = verify.execute(username, password)
        if result.error is not None:
            raise_user_error(result.error)
        return _dump(result.user)

    if username is not None:
        profile = find.execute(username)
        return _dump(profile) if profile else None

    return [_dump(profile) for profile in list_all.execute()]


@router.post("/users/login", response_model=UserRes)
def login(
    req: LoginReq,
    use_case: VerifyCredentialsUseCase = Depends(get_verify_credentials_use_case),
):
    result = use_case.execute(req.username, req.password)
    if result.error is not None:
        raise_user_error(result.error)
    return to_user_res(result.user)
