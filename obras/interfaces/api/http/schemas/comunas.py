"""Schemas HTTP para el catálogo de comunas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ConsejoComunalIn(BaseModel):
    nombre: str | None = None
    codigo_situr: str | None = None


class CreateComunaReq(BaseModel):
    nombre: str | None = None
    codigo_circuito_comunal: str | None = None
    parroquia: str | None = None
    consejos_comunales: list[ConsejoComunalIn] = Field(default_factory=list)


class ConsejoComunalRes(BaseModel):
    nombre: str
    codigo_situr: str


class ComunaRes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(alias="_id")
    nombre: str
    codigo_circuito_comunal: str
    parroquia: str
    consejos_comunales: list[ConsejoComunalRes] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
