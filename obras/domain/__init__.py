"""
===============================================================================
TARJETA CRC: domain/__init__.py
===============================================================================

Responsabilidades:
    - Centralizar exports del dominio (entidades + puertos).

Reglas:
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    Actuacion,
    Case,
    CaseStatus,
    Comuna,
    ConsejoComunal,
    Modificacion,
    ParroquiaCount,
)
from .repositories import CaseRepository, ComunaRepository, UserRepository
from .services import FileStoragePort

__all__ = [
    "Actuacion",
    "Case",
    "CaseRepository",
    "CaseStatus",
    "Comuna",
    "ComunaRepository",
    "ConsejoComunal",
    "FileStoragePort",
    "Modificacion",
    "ParroquiaCount",
    "UserRepository",
]
