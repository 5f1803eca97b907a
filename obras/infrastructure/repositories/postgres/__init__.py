from .case import PostgresCaseRepository
from .comuna import PostgresComunaRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresCaseRepository",
    "PostgresComunaRepository",
    "PostgresUserRepository",
]
