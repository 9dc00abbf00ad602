"""Map errors to the structured failure payload.

Authentication, CSRF and capability failures all produce the same response,
so a caller cannot tell which check rejected it.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from order_sheet.domain.errors import AuthorizationError, ErrorCode, InvalidDateError, ProviderError

logger = logging.getLogger(__name__)

_SECURITY_FAILURES = (
    AuthorizationError,
    DjangoPermissionDenied,
    exceptions.NotAuthenticated,
    exceptions.AuthenticationFailed,
    exceptions.PermissionDenied,
)


def error_response(code: ErrorCode, message: str, http_status: int) -> Response:
    return Response(
        {"success": False, "error_code": code.value, "error_message": message},
        status=http_status,
    )


def order_sheet_exception_handler(exc, context):
    if isinstance(exc, InvalidDateError):
        return error_response(exc.code, exc.message, status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, _SECURITY_FAILURES):
        # Capability denials are logged where they are raised.
        if not isinstance(exc, AuthorizationError):
            request = context.get("request")
            logger.warning(
                "Rejected order sheet request from %s: %s",
                request.META.get("REMOTE_ADDR", "unknown") if request is not None else "unknown",
                exc,
            )
        return error_response(ErrorCode.NOT_AUTHORIZED, AuthorizationError().message, status.HTTP_403_FORBIDDEN)

    if isinstance(exc, ProviderError):
        logger.error("Order sheet source unavailable: %s", exc.message)
        return error_response(
            ErrorCode.PROVIDER_FAILURE,
            "Orders could not be loaded. Please try again.",
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, exceptions.ValidationError):
        return error_response(ErrorCode.INVALID_REQUEST, "Invalid request.", status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is not None:
        response.data = {
            "success": False,
            "error_code": ErrorCode.INVALID_REQUEST.value,
            "error_message": "Request failed.",
        }
    return response
