"""DRF exception handling for service errors.

Maps ``ServiceError`` subclasses to an HTTP status and a stable body of
``{"code", "message", "field"}``. DRF validation and authentication errors
are rendered in the same shape; everything else falls through to DRF.
"""

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .errors import BadRequestError, ErrorCode, NotFoundError, ServiceError, UnauthorizedError

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVENTORY_VERSION_MISMATCH: status.HTTP_409_CONFLICT,
    ErrorCode.INVENTORY_QUANTITY_NEGATIVE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVENTORY_QUANTITY_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_ORDER_ITEMS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.DB_DOWN: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def service_error_response(exc: ServiceError, **extra) -> Response:
    code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({**exc.as_dict(), **extra}, status=code)


def _join(prefix, key):
    # list indexes arrive as ints (DRF >= 3.16 dict errors) or digit strings
    if isinstance(key, int) or (isinstance(key, str) and key.isdigit()):
        return f"{prefix}[{key}]"
    if key == "non_field_errors":
        return prefix
    return f"{prefix}.{key}" if prefix else key


def _first_error(detail, prefix=""):
    """Return ``(field, message)`` for the first leaf of a DRF error tree."""

    if isinstance(detail, dict):
        for key, value in detail.items():
            if value:
                return _first_error(value, _join(prefix, key))
    if isinstance(detail, list):
        for index, value in enumerate(detail):
            if value:
                nested = isinstance(value, (dict, list))
                return _first_error(value, _join(prefix, index) if nested else prefix)
    return prefix or None, str(detail)


def exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        return service_error_response(exc)
    if isinstance(exc, exceptions.ValidationError):
        field, message = _first_error(exc.detail)
        return service_error_response(BadRequestError(message, field=field), errors=exc.detail)
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response = service_error_response(UnauthorizedError(str(exc.detail)))
        if isinstance(exc, exceptions.NotAuthenticated):
            response["WWW-Authenticate"] = 'Bearer realm="api"'
        return response
    if isinstance(exc, exceptions.NotFound):
        return service_error_response(NotFoundError(str(exc.detail)))
    return drf_exception_handler(exc, context)
