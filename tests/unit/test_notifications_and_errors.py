"""
Unit tests for the notification builders and the service error helpers.
"""

import json
from logging.handlers import BufferingHandler

import pytest

from service.handlers.utils.errors import (
    ExternalServiceError,
    ResourceNotFoundError,
    ValidationError,
    create_error_response,
    get_http_status_code,
    log_error_metrics,
)
from service.handlers.utils.observability import logger
from service.logic.notifications import build_billing_record, build_order_email
from service.logic.order_service import ProductsNotFoundError
from service.logic.product_service import ProductNotFoundError
from service.models.events import OrderEvent


class TestNotifications:

    def test_order_created_email(self, order_event_body):
        email = build_order_email(OrderEvent.model_validate(order_event_body), "ORDER_CREATED")

        assert email["to"] == "john.doe@example.com"
        assert email["subject"] == "Your order order-123 was received"
        assert "Total: 2999.80 (CREDIT_CARD)" in email["body"]
        assert "Shipping: URGENT by FEDEX" in email["body"]

    def test_order_deleted_email(self, order_event_body):
        email = build_order_email(OrderEvent.model_validate(order_event_body), "ORDER_DELETED")

        assert email["subject"] == "Your order order-123 was cancelled"

    def test_unknown_event_type(self, order_event_body):
        with pytest.raises(ValueError):
            build_order_email(OrderEvent.model_validate(order_event_body), "ORDER_SHIPPED")

    def test_billing_record(self, order_event_body):
        record = build_billing_record(OrderEvent.model_validate(order_event_body))

        assert record == {
            "orderId": "order-123",
            "email": "john.doe@example.com",
            "payment": "CREDIT_CARD",
            "totalPrice": 2999.8,
            "requestId": "lambda-request-id",
        }


class TestErrors:

    @pytest.mark.parametrize("error, status_code", [
        (ResourceNotFoundError("Order"), 404),
        (ProductNotFoundError("p1"), 404),
        (ProductsNotFoundError(["p1"]), 404),
        (ValidationError(), 400),
        (ExternalServiceError("boom", service_name="SNS"), 502),
    ])
    def test_http_status_codes(self, error, status_code):
        assert get_http_status_code(error) == status_code

    def test_not_found_messages(self):
        assert ProductNotFoundError("p1").message == "Product not found"
        assert ProductsNotFoundError(["p1"]).message == "Some product was not found"
        assert ValidationError().message == "Bad request"

    def test_error_response_body(self):
        response = create_error_response(404, "Order not found", "api-id", "lambda-id")

        assert response.status_code == 404
        assert json.loads(response.body) == {
            "message": "Order not found",
            "ApiGwRequestId": "api-id",
            "LambdaRequestId": "lambda-id",
        }

    @pytest.mark.parametrize("error", [
        ProductNotFoundError("p1"),
        ValidationError(),
        ExternalServiceError("boom", service_name="SNS"),
    ])
    def test_log_error_metrics(self, error):
        handler = BufferingHandler(capacity=100)
        logger.addHandler(handler)
        try:
            log_error_metrics(error)
        finally:
            logger.removeHandler(handler)

        record = next(record for record in handler.buffer if record.getMessage() == error.message)
        assert record.error_code == error.error_code
        assert record.error_id == error.error_id
