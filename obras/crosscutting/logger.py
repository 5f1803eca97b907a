# obras/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logging del backend
===============================================================================

Una línea JSON por evento (LOG_JSON=true) o texto plano para desarrollo.
Cada línea lleva request_id/method/path del request en curso y los `extra`
del llamador, con secretos y hashes redactados y bytes resumidos (los PDF
nunca se vuelcan).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Responsabilidades:
  - RequestContextFilter: copiar obras.context al LogRecord.
  - redact(): limpiar valores antes de serializar.
  - JSONFormatter + setup_logger().

Colaboradores:
  - obras/context.py (current_context)
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from ..context import current_context

REDACTED = "***REDACTADO***"

# Atributos que trae todo LogRecord; lo demás vino por `extra`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_SECRET_KEYS = frozenset({"secret", "authorization", "database_url", "passwd"})
_MAX_TEXT = 8_000
_MAX_DEPTH = 4


def _is_secret(key: str) -> bool:
    key = key.lower()
    return key in _SECRET_KEYS or "password" in key or key.endswith("token")


def redact(value: Any, key: str | None = None, depth: int = 0) -> Any:
    """Copia serializable de `value` sin secretos (por nombre de clave)."""
    if key is not None and _is_secret(key):
        return REDACTED
    if depth > _MAX_DEPTH:
        return "…"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes {len(value)}B>"
    if isinstance(value, str):
        return value if len(value) <= _MAX_TEXT else value[:_MAX_TEXT] + "…"
    if isinstance(value, dict):
        return {str(k): redact(v, str(k), depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [redact(v, key, depth + 1) for v in value]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


class RequestContextFilter(logging.Filter):
    """Agrega request_id/method/path sin pisar un `extra` con el mismo nombre."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in current_context().items():
            if not hasattr(record, name):
                setattr(record, name, value)
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(
            (name, redact(value, name))
            for name, value in vars(record).items()
            if name not in _RECORD_ATTRS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _configured_output() -> tuple[int, bool]:
    from .config import get_settings

    try:
        settings = get_settings()
    except ValueError:
        # Config inválida: se loguea igual, con defaults.
        return logging.INFO, True
    level = logging.getLevelName((settings.log_level or "INFO").upper())
    return (level if isinstance(level, int) else logging.INFO), bool(settings.log_json)


def setup_logger(name: str = "obras-api") -> logging.Logger:
    """Logger de la app; idempotente ante reimports."""
    log = logging.getLogger(name)
    level, as_json = _configured_output()
    log.setLevel(level)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.addFilter(RequestContextFilter())
        handler.setFormatter(
            JSONFormatter()
            if as_json
            else logging.Formatter(
                "%(levelname)s [%(request_id)s] %(message)s",
                defaults={"request_id": "-"},
            )
        )
        log.addHandler(handler)
    return log


logger = setup_logger()
