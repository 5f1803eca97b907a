# obras/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middlewares HTTP
===============================================================================

RequestContextMiddleware
  Asigna un request_id (X-Request-Id entrante o uuid nuevo), lo deja en el
  contexto de logging y en request.state, y emite una línea por request.

BodyLimitMiddleware (ASGI puro)
  Corta bodies que superan MAX_BODY_BYTES, por Content-Length o contando
  chunks. En las rutas de upload el rechazo es el del adjunto
  (400 PAYLOAD_TOO_LARGE); en el resto, 413 BODY_TOO_LARGE.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Colaboradores:
  - obras/context.py (bind_request / reset_request / current_request_id)
  - crosscutting/error_responses.py (AppHTTPException.to_problem)
  - api/main.py (rutas de upload y mensaje del límite de adjunto)
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..context import bind_request, current_request_id, reset_request
from .error_responses import (
    PROBLEM_JSON_MEDIA_TYPE,
    AppHTTPException,
    body_too_large,
    payload_too_large,
)
from .logger import logger

_MAX_REQUEST_ID_LEN = 128


def _incoming_request_id(raw: str | None) -> str | None:
    value = (raw or "").strip()
    return value if 0 < len(value) <= _MAX_REQUEST_ID_LEN else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlación request_id + log de acceso (salvo healthz/readyz)."""

    quiet_paths = frozenset({"/healthz", "/readyz"})

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _incoming_request_id(request.headers.get("x-request-id")) or str(
            uuid.uuid4()
        )
        request.state.request_id = request_id
        token = bind_request(
            request_id=request_id, method=request.method, path=request.url.path
        )
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request falló", extra={"latency_ms": self._elapsed_ms(started)}
            )
            raise
        else:
            status_code = response.status_code
            response.headers["X-Request-Id"] = request_id
            return response
        finally:
            if request.url.path not in self.quiet_paths:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": self._elapsed_ms(started),
                    },
                )
            reset_request(token)

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)


class _LimitExceeded(Exception):
    pass


class BodyLimitMiddleware:
    """
    Límite global del body.

    upload_paths: rutas POST multipart cuyo exceso se informa como rechazo
    del adjunto (400 + upload_detail) en lugar de 413.
    """

    def __init__(
        self,
        app,
        max_bytes: int | None = None,
        *,
        upload_paths: Iterable[str] = (),
        upload_detail: str = "El archivo excede el máximo permitido.",
    ):
        if max_bytes is None:
            from .config import get_settings

            max_bytes = get_settings().max_body_bytes
        self.app = app
        self.max_bytes = max_bytes
        self.upload_paths = frozenset(upload_paths)
        self.upload_detail = upload_detail

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = self._declared_length(scope)
        if declared is not None and declared > self.max_bytes:
            await self._reject(scope, receive, send, seen=declared)
            return

        seen = 0
        response_started = False

        async def counting_receive():
            nonlocal seen
            message = await receive()
            if message["type"] == "http.request":
                seen += len(message.get("body") or b"")
                if seen > self.max_bytes:
                    raise _LimitExceeded
            return message

        async def tracking_send(message):
            nonlocal response_started
            response_started = response_started or (
                message["type"] == "http.response.start"
            )
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _LimitExceeded:
            if response_started:
                logger.error(
                    "body excedido con la respuesta ya iniciada",
                    extra={"path": scope.get("path", "")},
                )
                raise
            await self._reject(scope, receive, send, seen=seen)

    @staticmethod
    def _declared_length(scope) -> int | None:
        for name, value in scope.get("headers", []):
            if name.lower() == b"content-length":
                raw = value.decode("latin-1").strip()
                return int(raw) if raw.isdigit() else None
        return None

    def _rejection_for(self, scope) -> AppHTTPException:
        if scope.get("method") == "POST" and scope.get("path") in self.upload_paths:
            return payload_too_large(self.upload_detail)
        return body_too_large(self.max_bytes)

    async def _reject(self, scope, receive, send, *, seen: int) -> None:
        exc = self._rejection_for(scope)
        path = scope.get("path", "")
        request_id = (
            current_request_id()
            or _incoming_request_id(Request(scope).headers.get("x-request-id"))
            or str(uuid.uuid4())
        )
        logger.warning(
            "body rechazado por tamaño",
            extra={
                "path": path,
                "received_bytes": seen,
                "max_bytes": self.max_bytes,
                "error_code": exc.code.value,
            },
        )
        response = JSONResponse(
            exc.to_problem(instance=path, request_id=request_id),
            status_code=exc.status_code,
            media_type=PROBLEM_JSON_MEDIA_TYPE,
            headers={"X-Request-Id": request_id},
        )
        await response(scope, receive, send)
