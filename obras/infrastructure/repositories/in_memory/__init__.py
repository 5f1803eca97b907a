from .case import InMemoryCaseRepository
from .comuna import InMemoryComunaRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryCaseRepository",
    "InMemoryComunaRepository",
    "InMemoryUserRepository",
]
