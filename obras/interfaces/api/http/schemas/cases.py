"""
===============================================================================
TARJETA CRC: schemas/cases.py
===============================================================================

Módulo:
    Schemas HTTP para Casos

Responsabilidades:
    - Definir DTOs de request/response de /casos.
    - Mantener los nombres JSON históricos del API (`_id`, camelCase) vía
      alias; internamente se usan nombres snake_case.
    - Requests toleran campos extra (el cliente reenvía el caso completo):
      los campos de sistema se ignoran.

Colaboradores:
    - domain.entities.CaseStatus
    - routers/cases.py (mapea entidades -> DTOs)
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .....domain.entities import CaseStatus


class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------------------------------------------------------
# Bitácoras
# -----------------------------------------------------------------------------
class ActuacionRes(_AliasedModel):
    descripcion: str
    fecha: datetime
    usuario: str


class ModificacionRes(_AliasedModel):
    campo: str
    valor_antiguo: Any = Field(default=None, alias="valorAntiguo")
    valor_nuevo: Any = Field(default=None, alias="valorNuevo")
    fecha: datetime
    usuario: str


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class CaseRes(_AliasedModel):
    """Caso tal como lo consume el frontend."""

    id: UUID = Field(alias="_id")
    tipo_obra: str
    nombre_obra: str | None = None
    parroquia: str
    circuito: str
    eje: str
    comuna: str
    codigo_comuna: str = Field(alias="codigoComuna")
    name_jc: str = Field(alias="nameJC")
    name_ju: str = Field(alias="nameJU")
    enlace_comunal: str = Field(alias="enlaceComunal")
    case_description: str = Field(alias="caseDescription")
    case_date: date = Field(alias="caseDate")
    archivo: str
    ente_responsable: str
    cantidad_consejos_comunales: int
    consejo_comunal_ejecuta: str
    cantidad_familiares: int
    direccion_exacta: str
    responsable_sala_autogobierno: str
    jefe_calle: str
    jefe_politico_eje: str
    jefe_juventud_circuito_comunal: str
    codigo_personalizado: str | None = Field(default=None, alias="codigoPersonalizado")
    estado: CaseStatus
    fecha_entrega: date | None = Field(default=None, alias="fechaEntrega")
    actuaciones: list[ActuacionRes] = Field(default_factory=list)
    modificaciones: list[ModificacionRes] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class CaseMessageRes(BaseModel):
    message: str
    caso: CaseRes


class CaseCreatedRes(CaseMessageRes):
    id: UUID


class ParroquiaCountRes(_AliasedModel):
    parroquia: str = Field(alias="_id")
    count: int


class UploadRes(_AliasedModel):
    message: str
    file_name: str = Field(alias="fileName")
    location: str


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class ActuacionIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    descripcion: str | None = None
    fecha: datetime | str | None = None
    usuario: str | None = None


class UpdateCaseReq(_AliasedModel):
    """
    PATCH /casos/{id}: sólo se aplican los campos presentes.

    `username` identifica a quien edita (auditoría); no es un campo del caso.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tipo_obra: str | None = None
    nombre_obra: str | None = None
    parroquia: str | None = None
    circuito: str | None = None
    eje: str | None = None
    comuna: str | None = None
    codigo_comuna: str | None = Field(default=None, alias="codigoComuna")
    name_jc: str | None = Field(default=None, alias="nameJC")
    name_ju: str | None = Field(default=None, alias="nameJU")
    enlace_comunal: str | None = Field(default=None, alias="enlaceComunal")
    case_description: str | None = Field(default=None, alias="caseDescription")
    case_date: date | str | None = Field(default=None, alias="caseDate")
    archivo: str | None = None
    ente_responsable: str | None = None
    cantidad_consejos_comunales: int | str | None = None
    consejo_comunal_ejecuta: str | None = None
    cantidad_familiares: int | str | None = None
    direccion_exacta: str | None = None
    responsable_sala_autogobierno: str | None = None
    jefe_calle: str | None = None
    jefe_politico_eje: str | None = None
    jefe_juventud_circuito_comunal: str | None = None
    codigo_personalizado: str | None = Field(default=None, alias="codigoPersonalizado")
    actuaciones: list[ActuacionIn] | None = None
    username: str | None = None


class UpdateStatusReq(BaseModel):
    estado: str | None = None
    username: str | None = None


class ConfirmDeliveryReq(BaseModel):
    password: str | None = None
    username: str | None = None


class DeleteCaseReq(BaseModel):
    password: str | None = None


class AddActuacionReq(BaseModel):
    descripcion: str | None = None
    username: str | None = None
