"""Domain error taxonomy and the API error envelope.

Every module-specific exception subclasses one of the categories below.
Services raise them; the DRF ``exception_handler`` renders them (and DRF /
Pydantic errors) as::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


class DomainError(Exception):
    """Base class for business rule violations."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "domain_error"


class NotFound(DomainError):
    """A referenced product, exchange or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class PermissionDenied(DomainError):
    """The actor is not the owning party for a mutating operation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"


class InvalidInput(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"


class ConflictingState(DomainError):
    """A transition was attempted from a state that does not allow it."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflicting_state"


class StorageFailure(DomainError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_failure"


class Unauthenticated(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "not_authenticated"


# ---------------------------------------------------------------------------
# DRF exception handler
# ---------------------------------------------------------------------------


def _error(code: str, detail: str, attr: Optional[str] = None) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr}


def _flatten_validation_detail(
    detail: Any, attr: Optional[str] = None
) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors = []
        for key, value in detail.items():
            child = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                child = attr
            errors.extend(_flatten_validation_detail(value, child))
        return errors
    if isinstance(detail, list):
        errors = []
        for item in detail:
            errors.extend(_flatten_validation_detail(item, attr))
        return errors
    code = getattr(detail, "code", None) or "invalid"
    return [_error(code, str(detail), attr)]


def exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Render every handled error in the standard envelope.

    Unknown exceptions return ``None`` so Django produces a 500 and the
    error is logged by the request machinery.
    """
    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            error_type=type(exc).__name__,
            code=exc.code,
            detail=str(exc),
        )
        error_type = "server_error" if exc.status_code >= 500 else "client_error"
        return Response(
            {"type": error_type, "errors": [_error(exc.code, str(exc))]},
            status=exc.status_code,
        )

    if isinstance(exc, PydanticValidationError):
        errors = [
            _error(
                "invalid",
                err["msg"],
                ".".join(str(part) for part in err["loc"]) or None,
            )
            for err in exc.errors()
        ]
        return Response(
            {"type": "validation_error", "errors": errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound(*exc.args)
    elif isinstance(exc, DjangoPermissionDenied):
        exc = drf_exceptions.PermissionDenied(*exc.args)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, drf_exceptions.ValidationError):
        response.data = {
            "type": "validation_error",
            "errors": _flatten_validation_detail(exc.detail),
        }
    elif isinstance(exc, drf_exceptions.APIException):
        detail = exc.detail
        code = getattr(detail, "code", None) or exc.default_code
        response.data = {
            "type": "server_error" if response.status_code >= 500 else "client_error",
            "errors": [_error(code, str(detail))],
        }
    return response
