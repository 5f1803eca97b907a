"""
===============================================================================
USE CASE: List Cases
===============================================================================

Responsibilities:
    - Sin parámetros: todos los casos, más nuevos primero.
    - Con page y/o limit: una página (defaults page=1, limit=10) más total y
      total_pages para los headers X-Total-Count / X-Total-Pages.
    - limit se acota a max_limit (CASES_PAGE_MAX_LIMIT).

Collaborators:
    - CaseRepository.list_cases / count_cases
===============================================================================
"""

from __future__ import annotations

import math

from ....domain.repositories import CaseRepository
from .case_results import CaseError, CaseErrorCode, CaseListResult, RESOURCE_CASE

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class ListCasesUseCase:
    def __init__(self, repository: CaseRepository, *, max_limit: int = 10000) -> None:
        self._cases = repository
        self._max_limit = max_limit

    def execute(
        self, page: int | None = None, limit: int | None = None
    ) -> CaseListResult:
        if page is None and limit is None:
            cases = self._cases.list_cases()
            return CaseListResult(cases=cases, total=len(cases))

        page = DEFAULT_PAGE if page is None else page
        limit = DEFAULT_LIMIT if limit is None else limit
        if page < 1 or limit < 1:
            return CaseListResult(
                cases=[],
                error=CaseError(
                    code=CaseErrorCode.VALIDATION_ERROR,
                    message="page y limit deben ser enteros >= 1.",
                    resource=RESOURCE_CASE,
                ),
            )
        limit = min(limit, self._max_limit)

        total = self._cases.count_cases()
        cases = self._cases.list_cases(limit=limit, offset=(page - 1) * limit)
        return CaseListResult(
            cases=cases,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )
