"""USE CASE: Get Case (detalle por id)."""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import CaseRepository
from .case_results import CaseResult, not_found_result, parse_case_id


class GetCaseUseCase:
    def __init__(self, repository: CaseRepository) -> None:
        self._cases = repository

    def execute(self, case_id: str | UUID) -> CaseResult:
        parsed_id, id_error = parse_case_id(case_id)
        if id_error is not None:
            return CaseResult(error=id_error)

        case = self._cases.get_case(parsed_id)
        if case is None:
            return not_found_result()
        return CaseResult(case=case)
