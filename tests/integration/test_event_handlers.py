"""
Integration tests for the event driven handlers: product events, order
events (SNS), order e-mails (SQS), billing (SNS) and the order events
history API.
"""

import json

import pytest
from aws_lambda_powertools.utilities.data_classes.sqs_event import SQSRecord
from boto3.dynamodb.conditions import Key
from pydantic import ValidationError

from service.handlers import (
    billing_handler,
    order_emails_handler,
    order_events_fetch_handler,
    order_events_handler,
    product_events_handler,
)
from service.dal import get_events_dal
from service.models.events import OrderEvent, OrderEventDdb, ProductEvent, ProductEventDdb


def sqs_event(*bodies: str) -> dict:
    """Build an SQS event with one record per body."""
    return {
        "Records": [
            {
                "messageId": f"sqs-message-{index}",
                "receiptHandle": f"receipt-{index}",
                "body": body,
                "attributes": {
                    "ApproximateReceiveCount": "1",
                    "SentTimestamp": "1704110400000",
                    "SenderId": "AIDAIENQZJOLO23YVJ4VO",
                    "ApproximateFirstReceiveTimestamp": "1704110400001",
                },
                "messageAttributes": {},
                "md5OfBody": "e4e68fb7bd0e697a0ae8f1bb342846b3",
                "eventSource": "aws:sqs",
                "eventSourceARN": "arn:aws:sqs:us-east-1:123456789012:order-events",
                "awsRegion": "us-east-1",
            }
            for index, body in enumerate(bodies)
        ]
    }


def sns_envelope(body: dict, event_type: str, message_id: str = "sns-message-0") -> str:
    """SNS notification as delivered to a subscribed queue."""
    return json.dumps({
        "Type": "Notification",
        "MessageId": message_id,
        "TopicArn": "arn:aws:sns:us-east-1:123456789012:order-events",
        "Message": json.dumps(body),
        "Timestamp": "2024-01-01T12:00:00.000Z",
        "MessageAttributes": {"eventType": {"Type": "String", "Value": event_type}},
    })


class TestProductEventsHandler:

    def test_stores_product_event(self, events_table, lambda_context):
        event = {
            "requestId": "req-1",
            "eventType": "PRODUCT_CREATED",
            "productId": "p1",
            "productCode": "NBK",
            "productPrice": 1000.5,
            "email": "catalog@example.com",
        }

        result = product_events_handler.lambda_handler(event, lambda_context)

        assert result == {"productEventCreated": True, "message": "OK"}
        items = events_table.query(KeyConditionExpression=Key("pk").eq("#product_NBK"))["Items"]
        assert len(items) == 1
        assert items[0]["sk"].startswith("PRODUCT_CREATED#")
        assert items[0]["requestId"] == "req-1"
        assert items[0]["info"] == {"productId": "p1", "price": 1000.5}

    def test_rejects_unknown_event_type(self, events_table, lambda_context):
        event = {
            "requestId": "req-1",
            "eventType": "PRODUCT_RENAMED",
            "productId": "p1",
            "productCode": "NBK",
            "productPrice": 1.0,
            "email": "catalog@example.com",
        }

        with pytest.raises(ValidationError):
            product_events_handler.lambda_handler(event, lambda_context)

        assert events_table.scan()["Items"] == []


class TestOrderEventsHandler:

    def test_stores_each_record(self, events_table, lambda_context, sns_event, order_event_body):
        deleted = {**order_event_body, "orderId": "order-456"}

        result = order_events_handler.lambda_handler(
            sns_event((order_event_body, "ORDER_CREATED"), (deleted, "ORDER_DELETED")),
            lambda_context,
        )

        assert result == {"stored": 2}
        created_items = events_table.query(KeyConditionExpression=Key("pk").eq("#order_order-123"))["Items"]
        assert len(created_items) == 1
        assert created_items[0]["eventType"] == "ORDER_CREATED"
        assert created_items[0]["email"] == "john.doe@example.com"
        assert created_items[0]["info"] == {
            "orderId": "order-123",
            "productCodes": ["NBK-PRO-14", "NBK-PRO-14"],
            "messageId": "sns-message-0",
        }
        deleted_items = events_table.query(KeyConditionExpression=Key("pk").eq("#order_order-456"))["Items"]
        assert deleted_items[0]["sk"].startswith("ORDER_DELETED#")

    def test_invalid_message_fails_invocation(self, events_table, lambda_context, sns_event):
        with pytest.raises(ValidationError):
            order_events_handler.lambda_handler(sns_event(({"orderId": "x"}, "ORDER_CREATED")), lambda_context)


class TestBillingHandler:

    def test_bills_created_orders(self, lambda_context, sns_event, order_event_body):
        result = billing_handler.lambda_handler(
            sns_event((order_event_body, "ORDER_CREATED"), (order_event_body, "ORDER_DELETED")),
            lambda_context,
        )

        assert result == {"billed": 1}


class TestOrderEmailsHandler:

    def test_all_records_processed(self, lambda_context, order_event_body):
        event = sqs_event(
            sns_envelope(order_event_body, "ORDER_CREATED"),
            sns_envelope(order_event_body, "ORDER_DELETED", message_id="sns-message-1"),
        )

        result = order_emails_handler.lambda_handler(event, lambda_context)

        assert result == {"batchItemFailures": []}

    def test_partial_batch_failure(self, lambda_context, order_event_body):
        event = sqs_event(
            sns_envelope(order_event_body, "ORDER_CREATED"),
            "not an sns envelope",
            sns_envelope(order_event_body, "ORDER_SHIPPED", message_id="sns-message-2"),
        )

        result = order_emails_handler.lambda_handler(event, lambda_context)

        assert result == {
            "batchItemFailures": [
                {"itemIdentifier": "sqs-message-1"},
                {"itemIdentifier": "sqs-message-2"},
            ]
        }

    def test_record_handler_builds_email(self, order_event_body):
        record = SQSRecord(sqs_event(sns_envelope(order_event_body, "ORDER_CREATED"))["Records"][0])

        email = order_emails_handler.record_handler(record)

        assert email["to"] == "john.doe@example.com"
        assert email["eventType"] == "ORDER_CREATED"


class TestOrderEventsFetchHandler:

    @pytest.fixture
    def stored_events(self, events_table, order_event_body):
        dal = get_events_dal("test-events")
        event = OrderEvent.model_validate(order_event_body)
        dal.create_order_event(OrderEventDdb.from_event(event, "ORDER_CREATED", "msg-1"))
        dal.create_order_event(OrderEventDdb.from_event(event, "ORDER_DELETED", "msg-2"))

    def test_events_by_email(self, stored_events, api_gateway_event, lambda_context, response_body):
        response = order_events_fetch_handler.lambda_handler(
            api_gateway_event("GET", "/orders/events", query={"email": "john.doe@example.com"}),
            lambda_context,
        )

        assert response["statusCode"] == 200
        events = response_body(response)
        assert sorted(event["eventType"] for event in events) == ["ORDER_CREATED", "ORDER_DELETED"]
        assert set(events[0]) == {"email", "createdAt", "eventType", "requestId", "orderId", "productCodes"}

    def test_events_by_email_and_type(self, stored_events, api_gateway_event, lambda_context, response_body):
        response = order_events_fetch_handler.lambda_handler(
            api_gateway_event("GET", "/orders/events",
                              query={"email": "john.doe@example.com", "eventType": "ORDER_DELETED"}),
            lambda_context,
        )

        assert response["statusCode"] == 200
        assert [event["eventType"] for event in response_body(response)] == ["ORDER_DELETED"]

    def test_missing_email(self, events_table, api_gateway_event, lambda_context, response_body):
        response = order_events_fetch_handler.lambda_handler(
            api_gateway_event("GET", "/orders/events", query={"eventType": "ORDER_CREATED"}),
            lambda_context,
        )

        assert response["statusCode"] == 400
        assert response_body(response) == {
            "message": "Bad request",
            "ApiGwRequestId": "test-api-request-id",
            "LambdaRequestId": "test-lambda-request-id",
        }

    def test_unknown_route(self, events_table, api_gateway_event, lambda_context, response_body):
        response = order_events_fetch_handler.lambda_handler(api_gateway_event("POST", "/orders/events"), lambda_context)

        assert response["statusCode"] == 400

    def test_product_event_type_rejected(self, events_table, api_gateway_event, lambda_context, response_body):
        dal = get_events_dal("test-events")
        dal.create_product_event(ProductEventDdb.from_event(ProductEvent.model_validate({
            "requestId": "req-1",
            "eventType": "PRODUCT_CREATED",
            "productId": "p1",
            "productCode": "NBK",
            "productPrice": 10.0,
            "email": "catalog@example.com",
        })))

        response = order_events_fetch_handler.lambda_handler(
            api_gateway_event("GET", "/orders/events",
                              query={"email": "catalog@example.com", "eventType": "PRODUCT_CREATED"}),
            lambda_context,
        )

        assert response["statusCode"] == 400
        assert response_body(response)["message"] == "Bad request"

    def test_malformed_stored_event(self, events_table, api_gateway_event, lambda_context, response_body):
        events_table.put_item(Item={
            "pk": "#order_order-1",
            "sk": "ORDER_CREATED#1704110400000",
            "email": "john.doe@example.com",
            "eventType": "ORDER_CREATED",
        })

        response = order_events_fetch_handler.lambda_handler(
            api_gateway_event("GET", "/orders/events", query={"email": "john.doe@example.com"}),
            lambda_context,
        )

        assert response["statusCode"] == 500
        assert response_body(response)["message"] == "Internal server error"
