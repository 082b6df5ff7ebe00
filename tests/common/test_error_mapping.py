"""HTTP status mapping for domain errors."""

import pytest
from academy.api.errors import register_error_handlers, status_code_for
from academy.exceptions import (
    ConflictError,
    EmptyCartError,
    ForbiddenError,
    GatewayUnavailableError,
    InvalidStateError,
    NotFoundError,
    PaymentMismatchError,
    PaymentNotCompletedError,
    UnsupportedStatusError,
)
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ValidationError


@pytest.mark.parametrize(
    "error, status_code",
    [
        (NotFoundError("x"), 404),
        (ForbiddenError("x"), 403),
        (InvalidStateError("x"), 400),
        (PaymentMismatchError("x"), 400),
        (EmptyCartError("x"), 400),
        (ConflictError("x"), 409),
        (PaymentNotCompletedError("x"), 409),
        (UnsupportedStatusError("x"), 400),
        (GatewayUnavailableError("x"), 502),
    ],
)
def test_status_codes(error, status_code):
    assert status_code_for(error) == status_code


def test_mismatch_is_an_invalid_state():
    error = PaymentMismatchError("Amount mismatch")
    assert isinstance(error, InvalidStateError)
    assert error.to_dict() == {"kind": "payment_mismatch", "message": "Amount mismatch"}


class TestErrorHandlers:
    @pytest.fixture()
    def client(self):
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/missing")
        async def missing():
            raise NotFoundError("Order not found")

        @app.get("/invalid")
        async def invalid():
            raise ValidationError({"watch_time": ["value is lesser than 0"]})

        return TestClient(app)

    def test_domain_error_body(self, client):
        response = client.get("/missing")
        assert response.status_code == 404
        assert response.json() == {"error": {"kind": "not_found", "message": "Order not found"}}

    def test_validation_error_body(self, client):
        response = client.get("/invalid")
        assert response.status_code == 422
        body = response.json()["error"]
        assert body["kind"] == "validation"
        assert "watch_time" in body["fields"]
