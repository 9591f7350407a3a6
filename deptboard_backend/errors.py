"""
errors.py — API error taxonomy and the DRF exception handler

Every API failure leaves the server as a small JSON envelope:

    400  {"error": "Validation failed", "details": {<field>: [<message>, ...]}}
    401  {"error": "...", "code": "not_authenticated" | "invalid_credentials" | "invalid_token" | "token_expired"}
    403  {"error": "...", "code": "permission_denied" | "invalid_token"}
    404  {"error": "..."}
    500  {"error": "Internal server error"}

Unhandled exceptions are logged with their traceback and never echoed back to
the client. Nothing here retries; every operation is single-shot.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback

logger = logging.getLogger(__name__)


class InvalidCredentials(exceptions.AuthenticationFailed):
    default_detail = "Invalid password"
    default_code = "invalid_credentials"


class Unauthenticated(exceptions.NotAuthenticated):
    default_detail = "Access token required"
    default_code = "not_authenticated"


class InvalidTokenResponse(exceptions.APIException):
    """A presented token could not be verified (tampered, malformed or expired)."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Invalid or expired token"
    default_code = "invalid_token"


def _error_code(exc):
    detail = getattr(exc, "detail", None)
    return getattr(detail, "code", None)


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(as_serializer_error(exc))

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled error in %s", type(view).__name__ if view else "view", exc_info=exc
        )
        set_rollback()
        return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        response.data = {"error": "Validation failed", "details": response.data}
        return response

    data = response.data
    message = data.get("detail", "") if isinstance(data, dict) else data
    payload = {"error": str(message)}
    code = _error_code(exc)
    # Only auth failures carry a machine-readable reason.
    if code and response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        payload["code"] = code
    response.data = payload
    return response
