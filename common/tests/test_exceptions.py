from common.errors import (
    BadRequestError,
    DbDownError,
    DuplicateOrderItemsError,
    ErrorCode,
    NotFoundError,
    QuantityExceededError,
    QuantityNegativeError,
    UnauthorizedError,
    VersionMismatchError,
)
from common.exceptions import exception_handler
from rest_framework import exceptions


def _render(exc):
    return exception_handler(exc, {})


def test_service_errors_map_to_status_and_body():
    cases = [
        (NotFoundError(field="product_id"), 404),
        (VersionMismatchError(field="version"), 409),
        (QuantityNegativeError(), 400),
        (QuantityExceededError(), 400),
        (DuplicateOrderItemsError(), 400),
        (BadRequestError(field="quantity"), 400),
        (UnauthorizedError(), 401),
        (DbDownError(), 503),
    ]
    for exc, status_code in cases:
        response = _render(exc)
        assert response.status_code == status_code
        assert response.data["code"] == exc.code
        assert response.data["field"] == exc.field


def test_version_mismatch_tells_client_to_refetch():
    body = _render(VersionMismatchError(field="version")).data
    assert body["code"] == ErrorCode.INVENTORY_VERSION_MISMATCH
    assert "Refetch" in body["message"]


def test_validation_error_points_at_nested_field():
    exc = exceptions.ValidationError({"order_items": [{}, {"quantity": ["Ensure this value is greater than 0."]}]})
    response = _render(exc)
    assert response.status_code == 400
    assert response.data["code"] == ErrorCode.BAD_REQUEST
    assert response.data["field"] == "order_items[1].quantity"


def test_validation_error_indexes_dict_shaped_list_errors():
    exc = exceptions.ValidationError({"order_items": {1: {"export_from": ["\"WAREHOUSE\" is not a valid choice."]}}})
    assert _render(exc).data["field"] == "order_items[1].export_from"
    exc = exceptions.ValidationError({"order_items": {"0": {"non_field_errors": ["Invalid line."]}}})
    assert _render(exc).data["field"] == "order_items[0]"


def test_not_authenticated_is_unauthorized():
    response = _render(exceptions.NotAuthenticated())
    assert response.status_code == 401
    assert response.data["code"] == ErrorCode.UNAUTHORIZED


def test_other_exceptions_fall_back_to_drf():
    response = _render(exceptions.PermissionDenied())
    assert response.status_code == 403
    assert "detail" in response.data
