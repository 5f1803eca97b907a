"""USE CASE: Case Stats by Parroquia (cantidad de casos por parroquia)."""

from __future__ import annotations

from ....domain.repositories import CaseRepository
from .case_results import CaseStatsResult


class CaseStatsByParroquiaUseCase:
    def __init__(self, repository: CaseRepository) -> None:
        self._cases = repository

    def execute(self) -> CaseStatsResult:
        return CaseStatsResult(items=self._cases.count_cases_by_parroquia())
