"""
===============================================================================
TARJETA CRC: obras/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar request_id, método y path del request en curso en una sola
    ContextVar, como valor inmutable.
  - Entregar ese contexto al logger para que cada línea quede correlacionada.

Colaboradores:
  - crosscutting.middleware.RequestContextMiddleware (bind / reset)
  - crosscutting.logger.JSONFormatter (current_context)
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""


_EMPTY = RequestContext()
_current: ContextVar[RequestContext] = ContextVar("obras_request", default=_EMPTY)


def bind_request(*, request_id: str, method: str, path: str) -> Token:
    """Activa el contexto; devolver el token a reset_request() al terminar."""
    return _current.set(RequestContext(request_id=request_id, method=method, path=path))


def reset_request(token: Token) -> None:
    _current.reset(token)


def current_request_id() -> str:
    return _current.get().request_id


def current_context() -> dict[str, str]:
    """Campos no vacíos del contexto (para enriquecer logs)."""
    return {k: v for k, v in asdict(_current.get()).items() if v}
