"""Shared building blocks for the API views.

Every module view resolves the caller's ``SessionContext`` from the
``X-Session-ID`` header and translates domain exceptions into HTTP
responses explicitly.  Unexpected exceptions are never caught here.
"""

from __future__ import annotations

from typing import Mapping, Type

import structlog
from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.request import Request
from rest_framework.response import Response

from modules.core.context import SessionContext
from modules.core.middleware import SESSION_HEADER, correlation_id_var
from shared.domain.exceptions import DomainError, InvalidTransition

logger = structlog.get_logger(__name__)

ErrorStatusMap = Mapping[Type[DomainError], int]

DEFAULT_ERROR_STATUS: dict[Type[DomainError], int] = {
    InvalidTransition: status.HTTP_409_CONFLICT,
}


class SessionContextMixin:
    """Resolves the session context for the current request."""

    def get_session_context(self, request: Request) -> SessionContext:
        session_id = request.headers.get(SESSION_HEADER, "").strip()
        if not session_id:
            raise ParseError(f"{SESSION_HEADER} header is required.")
        return SessionContext(
            session_id=session_id,
            correlation_id=correlation_id_var.get(),
        )


def domain_error_response(
    exc: DomainError, error_status: ErrorStatusMap | None = None
) -> Response:
    """Map *exc* to a ``{"detail": ...}`` response.

    The most specific class in *error_status* wins; unmapped domain errors
    are client errors (400).
    """
    mapping: dict[Type[DomainError], int] = dict(DEFAULT_ERROR_STATUS)
    if error_status:
        mapping.update(error_status)
    code = status.HTTP_400_BAD_REQUEST
    for klass in type(exc).__mro__:
        if klass in mapping:
            code = mapping[klass]
            break
    logger.info(
        "api.domain_error",
        error=type(exc).__name__,
        status_code=code,
    )
    return Response({"detail": str(exc)}, status=code)
