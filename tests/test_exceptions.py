from routebid.core.exceptions import (
    DomainError, NotFoundError, ForbiddenError, InvalidTransitionError,
    ConflictError, OrderValidationError
)


def test_status_codes_and_error_codes():
    cases = [
        (NotFoundError("x"), 404, "NOT_FOUND"),
        (ForbiddenError("x"), 403, "FORBIDDEN"),
        (InvalidTransitionError("x"), 400, "INVALID_TRANSITION"),
        (ConflictError("x"), 409, "CONFLICT"),
        (OrderValidationError("x"), 422, "VALIDATION_ERROR"),
    ]
    for error, status_code, error_code in cases:
        assert isinstance(error, DomainError)
        assert error.status_code == status_code
        assert error.detail["error_code"] == error_code


def test_conflict_is_an_invalid_transition():
    error = ConflictError("ganó otra", current_status="accepted", target_status="accepted")
    assert isinstance(error, InvalidTransitionError)
    assert error.current_status == "accepted"


def test_detail_carries_context_without_nulls():
    error = InvalidTransitionError("no", current_status="delivered", order_id="abc")
    assert error.detail == {
        "error_code": "INVALID_TRANSITION",
        "message": "no",
        "current_status": "delivered",
        "order_id": "abc"
    }


def test_validation_error_names_field():
    error = OrderValidationError("precio inválido", field="bid_price")
    assert error.field == "bid_price"
    assert error.detail["field"] == "bid_price"
    assert str(error) == "VALIDATION_ERROR: precio inválido"
