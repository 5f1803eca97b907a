from .cases import CaseErrorCode
from .comunas import ComunaErrorCode
from .users import UserErrorCode

__all__ = ["CaseErrorCode", "ComunaErrorCode", "UserErrorCode"]
