"""
===============================================================================
TARJETA CRC: domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Case, Actuacion, Modificacion, Comuna)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Definir el ciclo de vida del caso (CaseStatus) y sus reglas mínimas.
    - Catalogar los campos descriptivos editables y su nombre público (JSON).

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases: construyen/consumen estas entidades.
    - interfaces/api: serializan/retornan DTOs basados en estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Las bitácoras (actuaciones / modificaciones) son colecciones de valor
      ordenadas, propiedad del caso; sólo se agregan entradas al final.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

# Usuario por defecto para entradas de bitácora sin actor explícito.
DEFAULT_ACTOR = "Sistema"

# Valor por defecto de los campos de texto opcionales.
NOT_AVAILABLE = "N/A"


# ---------------------------------------------------------------------------
# Estado del caso
# ---------------------------------------------------------------------------


class CaseStatus(str, Enum):
    """Ciclo de vida: Cargado -> Supervisado -> En Desarrollo -> Entregado."""

    CARGADO = "Cargado"
    SUPERVISADO = "Supervisado"
    EN_DESARROLLO = "En Desarrollo"
    ENTREGADO = "Entregado"

    @property
    def is_terminal(self) -> bool:
        return self is CaseStatus.ENTREGADO


# Estados alcanzables por el cambio de estado genérico (Entregado queda afuera).
MANUAL_STATUSES = frozenset(
    {CaseStatus.CARGADO, CaseStatus.SUPERVISADO, CaseStatus.EN_DESARROLLO}
)


# ---------------------------------------------------------------------------
# Catálogo de campos descriptivos (atributo -> nombre público)
# ---------------------------------------------------------------------------

REQUIRED_TEXT_FIELDS: Dict[str, str] = {
    "tipo_obra": "tipo_obra",
    "parroquia": "parroquia",
    "circuito": "circuito",
    "eje": "eje",
    "comuna": "comuna",
    "codigo_comuna": "codigoComuna",
    "name_jc": "nameJC",
    "name_ju": "nameJU",
    "enlace_comunal": "enlaceComunal",
    "case_description": "caseDescription",
}

OPTIONAL_TEXT_FIELDS: Dict[str, str] = {
    "ente_responsable": "ente_responsable",
    "consejo_comunal_ejecuta": "consejo_comunal_ejecuta",
    "direccion_exacta": "direccion_exacta",
    "responsable_sala_autogobierno": "responsable_sala_autogobierno",
    "jefe_calle": "jefe_calle",
    "jefe_politico_eje": "jefe_politico_eje",
    "jefe_juventud_circuito_comunal": "jefe_juventud_circuito_comunal",
}

NULLABLE_TEXT_FIELDS: Dict[str, str] = {
    "nombre_obra": "nombre_obra",
    "codigo_personalizado": "codigoPersonalizado",
}

COUNT_FIELDS: Dict[str, str] = {
    "cantidad_consejos_comunales": "cantidad_consejos_comunales",
    "cantidad_familiares": "cantidad_familiares",
}

DATE_FIELDS: Dict[str, str] = {"case_date": "caseDate"}

# Campos que replaceFields puede tocar (además de los descriptivos, el adjunto).
EDITABLE_FIELDS: Dict[str, str] = {
    **REQUIRED_TEXT_FIELDS,
    **NULLABLE_TEXT_FIELDS,
    **OPTIONAL_TEXT_FIELDS,
    **COUNT_FIELDS,
    **DATE_FIELDS,
    "archivo": "archivo",
}


def _jsonable(value: Any) -> Any:
    """Normaliza valores de bitácora a tipos JSON (fechas -> ISO 8601)."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


# ---------------------------------------------------------------------------
# Bitácoras (value objects)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Actuacion:
    """Nota libre, fechada y atribuida, agregada al historial del caso."""

    descripcion: str
    fecha: datetime
    usuario: str = DEFAULT_ACTOR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "descripcion": self.descripcion,
            "fecha": self.fecha.isoformat(),
            "usuario": self.usuario,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Actuacion":
        return cls(
            descripcion=str(raw["descripcion"]),
            fecha=_parse_timestamp(raw["fecha"]),
            usuario=raw.get("usuario") or DEFAULT_ACTOR,
        )


@dataclass(frozen=True, slots=True)
class Modificacion:
    """Registro estructurado del cambio de un campo (valor anterior / nuevo)."""

    campo: str
    valor_antiguo: Any
    valor_nuevo: Any
    fecha: datetime
    usuario: str = DEFAULT_ACTOR

    @classmethod
    def record(
        cls,
        campo: str,
        old: Any,
        new: Any,
        *,
        fecha: datetime,
        usuario: str | None = None,
    ) -> "Modificacion":
        return cls(
            campo=campo,
            valor_antiguo=_jsonable(old),
            valor_nuevo=_jsonable(new),
            fecha=fecha,
            usuario=usuario or DEFAULT_ACTOR,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campo": self.campo,
            "valorAntiguo": self.valor_antiguo,
            "valorNuevo": self.valor_nuevo,
            "fecha": self.fecha.isoformat(),
            "usuario": self.usuario,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Modificacion":
        return cls(
            campo=str(raw["campo"]),
            valor_antiguo=raw.get("valorAntiguo"),
            valor_nuevo=raw.get("valorNuevo"),
            fecha=_parse_timestamp(raw["fecha"]),
            usuario=raw.get("usuario") or DEFAULT_ACTOR,
        )


# ---------------------------------------------------------------------------
# Case
# ---------------------------------------------------------------------------


@dataclass
class Case:
    """
    Caso de obra pública.

    Invariantes:
      - estado inicial Cargado; Entregado es terminal para el cambio genérico.
      - fecha_entrega sólo se setea al confirmar la entrega.
      - actuaciones / modificaciones sólo crecen (append-only).
    """

    id: UUID
    tipo_obra: str
    parroquia: str
    circuito: str
    eje: str
    comuna: str
    codigo_comuna: str
    name_jc: str
    name_ju: str
    enlace_comunal: str
    case_description: str
    case_date: date
    archivo: str
    nombre_obra: Optional[str] = None
    ente_responsable: str = NOT_AVAILABLE
    cantidad_consejos_comunales: int = 0
    consejo_comunal_ejecuta: str = NOT_AVAILABLE
    cantidad_familiares: int = 0
    direccion_exacta: str = NOT_AVAILABLE
    responsable_sala_autogobierno: str = NOT_AVAILABLE
    jefe_calle: str = NOT_AVAILABLE
    jefe_politico_eje: str = NOT_AVAILABLE
    jefe_juventud_circuito_comunal: str = NOT_AVAILABLE
    codigo_personalizado: Optional[str] = None
    estado: CaseStatus = CaseStatus.CARGADO
    fecha_entrega: Optional[date] = None
    actuaciones: List[Actuacion] = field(default_factory=list)
    modificaciones: List[Modificacion] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_delivered(self) -> bool:
        return self.estado.is_terminal


@dataclass(frozen=True, slots=True)
class ParroquiaCount:
    """Cantidad de casos agrupados por parroquia (estadística)."""

    parroquia: str
    count: int


# ---------------------------------------------------------------------------
# Comuna
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConsejoComunal:
    nombre: str
    codigo_situr: str

    def to_dict(self) -> Dict[str, str]:
        return {"nombre": self.nombre, "codigo_situr": self.codigo_situr}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ConsejoComunal":
        return cls(nombre=str(raw["nombre"]), codigo_situr=str(raw["codigo_situr"]))


@dataclass
class Comuna:
    """Comuna registrada (catálogo territorial) con sus consejos comunales."""

    id: UUID
    nombre: str
    codigo_circuito_comunal: str
    parroquia: str
    consejos_comunales: List[ConsejoComunal] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
