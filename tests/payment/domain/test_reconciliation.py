"""Domain tests for gateway-state → local-transition mapping."""

import pytest
from academy.catalogue.port import CourseSnapshot
from academy.exceptions import InvalidStateError, PaymentMismatchError, UnsupportedStatusError
from academy.gateway.port import CHANNEL_LIVE, CHANNEL_TEST, GatewayPayment
from academy.order.order import Order, OrderStatus
from academy.payment.payment import Payment, PaymentStatus
from academy.payment.reconciliation import apply_gateway_status, check_against_order

COURSES = [
    CourseSnapshot(id="course-python", title="Python Basics", slug="python-basics", thumbnail_url=None, price=30000),
    CourseSnapshot(id="course-data", title="Data Analysis", slug="data-analysis", thumbnail_url=None, price=20000),
]


def _order():
    return Order.place(user_id="user-001", courses=COURSES)


def _gateway_payment(order, **overrides):
    defaults = {
        "payment_id": "pay-ext-001",
        "status": "PAID",
        "amount": 50000,
        "currency": "KRW",
        "channel": CHANNEL_LIVE,
        "order_id": str(order.id),
    }
    defaults.update(overrides)
    return GatewayPayment(**defaults)


class TestCheckAgainstOrder:
    def test_matching_record_passes(self):
        order = _order()
        assert check_against_order(order, _gateway_payment(order), "KRW", strict=True) == []

    def test_amount_mismatch_rejected_when_strict(self):
        order = _order()
        with pytest.raises(PaymentMismatchError):
            check_against_order(order, _gateway_payment(order, amount=100), "KRW", strict=True)

    def test_currency_mismatch_rejected_when_strict(self):
        order = _order()
        with pytest.raises(PaymentMismatchError):
            check_against_order(order, _gateway_payment(order, currency="USD"), "KRW", strict=True)

    def test_foreign_order_rejected_when_strict(self):
        order = _order()
        with pytest.raises(PaymentMismatchError):
            check_against_order(order, _gateway_payment(order, order_id="ord-other"), "KRW", strict=True)

    def test_missing_correlation_token_is_fine(self):
        order = _order()
        assert check_against_order(order, _gateway_payment(order, order_id=None), "KRW", strict=True) == []

    def test_mismatch_is_advisory_when_not_strict(self):
        order = _order()
        record = _gateway_payment(order, amount=100, currency="USD", channel=CHANNEL_TEST)
        problems = check_against_order(order, record, "KRW", strict=False)
        assert len(problems) == 2

    def test_mismatch_error_is_invalid_state(self):
        assert issubclass(PaymentMismatchError, InvalidStateError)


class TestApplyGatewayStatus:
    def _payment(self, order):
        return Payment.open(order_id=str(order.id), gateway_payment=_gateway_payment(order))

    def test_paid_moves_payment_and_order(self):
        order = _order()
        payment = self._payment(order)
        assert apply_gateway_status(payment, order, "PAID", transaction_id="txn-1") is True
        assert payment.status == PaymentStatus.PAID.value
        assert order.status == OrderStatus.PAID.value

    def test_paid_again_does_not_signal(self):
        order = _order()
        payment = self._payment(order)
        apply_gateway_status(payment, order, "PAID")
        assert apply_gateway_status(payment, order, "PAID") is False

    def test_failed_leaves_order_pending(self):
        order = _order()
        payment = self._payment(order)
        assert apply_gateway_status(payment, None, "FAILED", failure_reason="Declined") is False
        assert payment.status == PaymentStatus.FAILED.value
        assert order.status == OrderStatus.PENDING.value

    def test_cancelled(self):
        order = _order()
        payment = self._payment(order)
        apply_gateway_status(payment, None, "CANCELLED")
        assert payment.status == PaymentStatus.CANCELLED.value
        assert payment.cancelled_at is not None

    def test_unknown_status(self):
        order = _order()
        with pytest.raises(UnsupportedStatusError):
            apply_gateway_status(self._payment(order), order, "PARTIAL_CANCELLED")
