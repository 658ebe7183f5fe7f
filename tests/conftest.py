"""
Pytest configuration and shared fixtures for the e-commerce service.

This module provides common test fixtures and configuration used across
unit, integration, infra and end-to-end tests.
"""

import json
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock, patch

import boto3
import pytest
from moto import mock_aws

PRODUCTS_TABLE = "test-products"
ORDERS_TABLE = "test-orders"
EVENTS_TABLE = "test-events"
ORDER_EVENTS_TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:order-events"


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "PRODUCTS_DDB": PRODUCTS_TABLE,
        "ORDERS_DDB": ORDERS_TABLE,
        "EVENTS_DDB": EVENTS_TABLE,
        "ORDER_EVENTS_TOPIC_ARN": ORDER_EVENTS_TOPIC_ARN,
        "PRODUCT_EVENTS_FUNCTION_NAME": "ProductEventsFunction",
        "PRODUCT_EVENTS_EMAIL": "catalog@test.example.com",
        "POWERTOOLS_SERVICE_NAME": "test-ecommerce",
        "POWERTOOLS_METRICS_NAMESPACE": "TestECommerce",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    })


# AWS fixtures
@pytest.fixture
def aws():
    """Mock every AWS service for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def products_table(aws):
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
    table = dynamodb.create_table(
        TableName=PRODUCTS_TABLE,
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    yield table


@pytest.fixture
def orders_table(aws):
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
    table = dynamodb.create_table(
        TableName=ORDERS_TABLE,
        KeySchema=[
            {"AttributeName": "pk", "KeyType": "HASH"},
            {"AttributeName": "sk", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    yield table


@pytest.fixture
def events_table(aws):
    """Events table with the emailIdx index."""
    dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
    table = dynamodb.create_table(
        TableName=EVENTS_TABLE,
        KeySchema=[
            {"AttributeName": "pk", "KeyType": "HASH"},
            {"AttributeName": "sk", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "pk", "AttributeType": "S"},
            {"AttributeName": "sk", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "emailIdx",
                "KeySchema": [
                    {"AttributeName": "email", "KeyType": "HASH"},
                    {"AttributeName": "sk", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    yield table


@pytest.fixture
def order_events_topic(aws) -> str:
    """Create the order events topic and return its ARN."""
    sns = boto3.client("sns", region_name="us-east-1")
    return sns.create_topic(Name="order-events")["TopicArn"]


@pytest.fixture
def topic_messages(aws, order_events_topic) -> Callable[[], list]:
    """
    Subscribe a queue to the order events topic.

    Returns a callable draining the SNS envelopes received by the queue.
    """
    sqs = boto3.client("sqs", region_name="us-east-1")
    queue_url = sqs.create_queue(QueueName="order-events-capture")["QueueUrl"]
    queue_arn = sqs.get_queue_attributes(QueueUrl=queue_url, AttributeNames=["QueueArn"])["Attributes"]["QueueArn"]
    boto3.client("sns", region_name="us-east-1").subscribe(
        TopicArn=order_events_topic, Protocol="sqs", Endpoint=queue_arn,
    )

    def drain() -> list:
        response = sqs.receive_message(QueueUrl=queue_url, MaxNumberOfMessages=10)
        return [json.loads(message["Body"]) for message in response.get("Messages", [])]

    return drain


@pytest.fixture
def mock_product_events():
    """Replace the synchronous invoke of the product events function."""
    with patch(
        "service.events.product_events_invoker.ProductEventsInvoker.send_product_event",
        return_value={"productEventCreated": True, "message": "OK"},
    ) as mock:
        yield mock


# Sample data fixtures
@pytest.fixture
def sample_product_data() -> Dict[str, Any]:
    """Sample product request body."""
    return {
        "productName": "Notebook Pro 14",
        "code": "NBK-PRO-14",
        "price": 1499.9,
        "model": "2024",
        "productUrl": "https://shop.example.com/products/nbk-pro-14",
    }


@pytest.fixture
def sample_order_data() -> Callable[..., Dict[str, Any]]:
    """Build an order request body for the given product ids."""

    def build(*product_ids: str, email: str = "John.Doe@Example.com") -> Dict[str, Any]:
        return {
            "email": email,
            "productIds": list(product_ids),
            "payment": "CREDIT_CARD",
            "shipping": {"type": "URGENT", "carrier": "FEDEX"},
        }

    return build


@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Build an API Gateway REST proxy event."""

    def build(
        method: str,
        path: str,
        body: Optional[Any] = None,
        query: Optional[Dict[str, str]] = None,
        resource: Optional[str] = None,
        path_parameters: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "resource": resource or path,
            "path": path,
            "httpMethod": method,
            "headers": {
                "Content-Type": "application/json",
                "User-Agent": "test-agent/1.0",
            },
            "multiValueHeaders": {},
            "body": body,
            "requestContext": {
                "requestId": "test-api-request-id",
                "accountId": "123456789012",
                "stage": "prod",
                "httpMethod": method,
                "path": f"/prod{path}",
                "resourcePath": resource or path,
                "protocol": "HTTP/1.1",
                "requestTime": "01/Jan/2024:12:00:00 +0000",
                "requestTimeEpoch": 1704110400000,
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "pathParameters": path_parameters,
            "queryStringParameters": query,
            "multiValueQueryStringParameters": {k: [v] for k, v in query.items()} if query else None,
            "stageVariables": None,
            "isBase64Encoded": False,
        }

    return build


@pytest.fixture
def sns_event() -> Callable[..., Dict[str, Any]]:
    """Build an SNS event delivering one message per (body, eventType) pair."""

    def build(*messages: tuple) -> Dict[str, Any]:
        records = []
        for index, (body, event_type) in enumerate(messages):
            records.append({
                "EventSource": "aws:sns",
                "EventVersion": "1.0",
                "EventSubscriptionArn": f"{ORDER_EVENTS_TOPIC_ARN}:subscription-{index}",
                "Sns": {
                    "Type": "Notification",
                    "MessageId": f"sns-message-{index}",
                    "TopicArn": ORDER_EVENTS_TOPIC_ARN,
                    "Subject": None,
                    "Message": json.dumps(body),
                    "Timestamp": "2024-01-01T12:00:00.000Z",
                    "SignatureVersion": "1",
                    "Signature": "EXAMPLE",
                    "SigningCertUrl": "https://sns.us-east-1.amazonaws.com/cert.pem",
                    "UnsubscribeUrl": "https://sns.us-east-1.amazonaws.com/unsubscribe",
                    "MessageAttributes": {
                        "eventType": {"Type": "String", "Value": event_type},
                    },
                },
            })
        return {"Records": records}

    return build


@pytest.fixture
def order_event_body() -> Dict[str, Any]:
    """Order event as published on the order events topic."""
    return {
        "email": "john.doe@example.com",
        "orderId": "order-123",
        "shipping": {"type": "URGENT", "carrier": "FEDEX"},
        "billing": {"payment": "CREDIT_CARD", "totalPrice": 2999.8},
        "productCodes": ["NBK-PRO-14", "NBK-PRO-14"],
        "requestId": "lambda-request-id",
    }


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-lambda-function"
    context.memory_limit_in_mb = "128"
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-lambda-request-id"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def response_body() -> Callable[[Dict[str, Any]], Any]:
    """Decode the JSON body of a Lambda proxy response."""

    def decode(response: Dict[str, Any]) -> Any:
        return json.loads(response["body"]) if response.get("body") else None

    return decode


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests against mocked AWS services")
    config.addinivalue_line("markers", "infra: CDK synthesis tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests against a deployed API")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)
        elif f"{os.sep}integration{os.sep}" in path:
            item.add_marker(pytest.mark.integration)
        elif f"{os.sep}infra{os.sep}" in path:
            item.add_marker(pytest.mark.infra)
        elif f"{os.sep}e2e{os.sep}" in path:
            item.add_marker(pytest.mark.e2e)


# End-to-end fixtures
@pytest.fixture
def integration_client():
    """HTTP client for the deployed API, skipped when API_BASE_URL is unset."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client
