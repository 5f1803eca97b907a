from .in_memory import (
    InMemoryCaseRepository,
    InMemoryComunaRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresCaseRepository,
    PostgresComunaRepository,
    PostgresUserRepository,
)

__all__ = [
    "InMemoryCaseRepository",
    "InMemoryComunaRepository",
    "InMemoryUserRepository",
    "PostgresCaseRepository",
    "PostgresComunaRepository",
    "PostgresUserRepository",
]
