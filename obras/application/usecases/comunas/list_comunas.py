"""
USE CASES: consultas del catálogo de comunas.

- ListComunasByParroquiaUseCase: comunas de una parroquia.
- ListComunasNoContactadasUseCase: comunas cuyo nombre no aparece como
  `comuna` de ningún caso (todavía sin obras registradas).
"""

from __future__ import annotations

from ....domain.repositories import CaseRepository, ComunaRepository
from .comuna_results import ComunaListResult


class ListComunasByParroquiaUseCase:
    def __init__(self, repository: ComunaRepository) -> None:
        self._comunas = repository

    def execute(self, parroquia: str) -> ComunaListResult:
        return ComunaListResult(
            comunas=self._comunas.list_comunas_by_parroquia(parroquia.strip())
        )


class ListComunasNoContactadasUseCase:
    def __init__(
        self, repository: ComunaRepository, case_repository: CaseRepository
    ) -> None:
        self._comunas = repository
        self._cases = case_repository

    def execute(self) -> ComunaListResult:
        contactadas = self._cases.list_case_comunas()
        return ComunaListResult(comunas=self._comunas.list_comunas_excluding(contactadas))
