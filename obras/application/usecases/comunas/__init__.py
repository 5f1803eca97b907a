from .comuna_results import (
    ComunaError,
    ComunaErrorCode,
    ComunaListResult,
    ComunaResult,
)
from .create_comuna import CreateComunaInput, CreateComunaUseCase
from .list_comunas import ListComunasByParroquiaUseCase, ListComunasNoContactadasUseCase

__all__ = [
    "ComunaError",
    "ComunaErrorCode",
    "ComunaListResult",
    "ComunaResult",
    "CreateComunaInput",
    "CreateComunaUseCase",
    "ListComunasByParroquiaUseCase",
    "ListComunasNoContactadasUseCase",
]
