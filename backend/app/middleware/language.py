"""Request language detection."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from backend.app.core.i18n import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


class LanguageMiddleware(BaseHTTPMiddleware):
    """Expose the request language as ``request.state.language``.

    A ``lang`` query parameter wins over ``Accept-Language``; anything other
    than Indonesian or English falls back to Indonesian. The resolved
    language is echoed back via the ``Content-Language`` response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        override = request.query_params.get("lang", "").strip().lower()
        if override in SUPPORTED_LANGUAGES:
            request.state.language = override
        else:
            request.state.language = resolve_language(
                request.headers.get("Accept-Language", "")
            )

        response = await call_next(request)
        response.headers["Content-Language"] = request.state.language
        return response


def resolve_language(header: str) -> str:
    """First supported tag of an Accept-Language header, in listed order."""
    for part in header.split(","):
        primary = part.split(";")[0].strip().lower().split("-")[0]
        if primary in SUPPORTED_LANGUAGES:
            return primary
    return DEFAULT_LANGUAGE
