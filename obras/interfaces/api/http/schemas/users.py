"""Schemas HTTP para usuarios (registro / login / perfil)."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .....identity.users import UserRole


class RegisterUserReq(BaseModel):
    # Los faltantes/vacíos se validan en el caso de uso (VALIDATION_ERROR).
    name: str | None = None
    username: str | None = None
    password: str | None = None
    role: str | None = None


class LoginReq(BaseModel):
    username: str | None = None
    password: str | None = None


class UserRes(BaseModel):
    """Perfil público: nunca incluye el hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="_id")
    name: str
    username: str
    role: UserRole
    created_at: datetime | None = Field(default=None, alias="createdAt")


class UserMessageRes(BaseModel):
    message: str
    user: UserRes
