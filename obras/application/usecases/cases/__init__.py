from .add_actuacion import AddActuacionUseCase
from .case_results import (
    CaseError,
    CaseErrorCode,
    CaseListResult,
    CaseResult,
    CaseStatsResult,
    parse_case_id,
)
from .case_stats import CaseStatsByParroquiaUseCase
from .confirm_delivery import DELIVERY_NOTE, ConfirmDeliveryUseCase
from .create_case import CaseAttachment, CreateCaseInput, CreateCaseUseCase
from .delete_case import DeleteCaseUseCase
from .get_case import GetCaseUseCase
from .list_cases import ListCasesUseCase
from .update_case import UpdateCaseUseCase
from .update_case_status import UpdateCaseStatusUseCase

__all__ = [
    "AddActuacionUseCase",
    "CaseAttachment",
    "CaseError",
    "CaseErrorCode",
    "CaseListResult",
    "CaseResult",
    "CaseStatsByParroquiaUseCase",
    "CaseStatsResult",
    "ConfirmDeliveryUseCase",
    "CreateCaseInput",
    "CreateCaseUseCase",
    "DELIVERY_NOTE",
    "DeleteCaseUseCase",
    "GetCaseUseCase",
    "ListCasesUseCase",
    "UpdateCaseStatusUseCase",
    "UpdateCaseUseCase",
    "parse_case_id",
]
