# obras/crosscutting/security.py
"""
===============================================================================
MÓDULO: Headers de seguridad
===============================================================================

Middleware ASGI que agrega a cada respuesta HTTP un set fijo de headers de
hardening, calculado una vez según el entorno. La CSP habilita los CDN que
usa el frontend de gabinete; fuera de producción también 'unsafe-inline'
(Swagger UI). HSTS sólo en producción y cuando el request llegó por HTTPS,
directo o informado por el proxy con X-Forwarded-Proto.

Colaboradores:
  - crosscutting.config.get_settings
===============================================================================
"""

from __future__ import annotations

from starlette.datastructures import Headers, MutableHeaders

HSTS_VALUE = "max-age=31536000; includeSubDomains"

_CDN_SCRIPTS = (
    "https://cdn.jsdelivr.net",
    "https://cdnjs.cloudflare.com",
    "https://unpkg.com",
)
_CDN_STYLES = ("https://cdnjs.cloudflare.com",)


def content_security_policy(*, allow_inline: bool) -> str:
    inline = ("'unsafe-inline'",) if allow_inline else ()
    directives = {
        "default-src": ("'self'",),
        "script-src": ("'self'", *inline, *_CDN_SCRIPTS),
        "style-src": ("'self'", *inline, *_CDN_STYLES),
        "font-src": ("'self'", *_CDN_STYLES),
        "img-src": ("'self'", "data:"),
    }
    return "; ".join(
        f"{name} {' '.join(sources)}" for name, sources in directives.items()
    )


def hardening_headers(*, production: bool) -> dict[str, str]:
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
        "Content-Security-Policy": content_security_policy(allow_inline=not production),
    }


class SecurityHeadersMiddleware:
    def __init__(self, app):
        from . import config

        self.app = app
        self.production = config.get_settings().is_production()
        self.headers = hardening_headers(production=self.production)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        add_hsts = self.production and self._is_https(scope)

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.update(self.headers)
                if add_hsts:
                    headers["Strict-Transport-Security"] = HSTS_VALUE
            await send(message)

        await self.app(scope, receive, send_with_headers)

    @staticmethod
    def _is_https(scope) -> bool:
        forwarded = Headers(scope=scope).get("x-forwarded-proto", "")
        return (forwarded or scope.get("scheme", "")).lower() == "https"
