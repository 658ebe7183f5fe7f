"""
Synchronous delivery of product events to the product events function.
"""

import json
from typing import Any, Dict

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from service.handlers.utils.errors import ExternalServiceError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.events import ProductEvent, ProductEventType
from service.models.product import Product


class ProductEventsInvoker:
    """Invokes the product events function with ``RequestResponse`` semantics."""

    def __init__(self, function_name: str, email: str):
        self.function_name = function_name
        self.email = email
        self.lambda_client = boto3.client('lambda')

    @tracer.capture_method
    def send_product_event(self, product: Product, event_type: ProductEventType, lambda_request_id: str) -> Dict[str, Any]:
        """
        Send a product event and wait for it to be stored.

        Args:
            product: Product the event is about
            event_type: Lifecycle event type
            lambda_request_id: Request id of the invoking function

        Returns:
            Decoded response payload of the product events function

        Raises:
            ExternalServiceError: If the invoke fails or the function errors
        """
        event = ProductEvent(
            request_id=lambda_request_id,
            event_type=event_type,
            product_id=product.id,
            product_code=product.code,
            product_price=product.price,
            email=self.email,
        )

        try:
            response = self.lambda_client.invoke(
                FunctionName=self.function_name,
                InvocationType='RequestResponse',
                Payload=event.model_dump_json(by_alias=True),
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to invoke product events function", extra={
                "function_name": self.function_name,
                "product_id": product.id,
                "error": str(e),
            })
            raise ExternalServiceError(
                message=f"Failed to send {event_type.value} for product {product.id}",
                service_name="Lambda",
                error_code="EVENT_PUBLISH_FAILED",
            ) from e

        payload = json.loads(response['Payload'].read() or b'null')
        if response.get('FunctionError'):
            logger.error("Product events function failed", extra={
                "function_name": self.function_name,
                "product_id": product.id,
                "payload": payload,
            })
            raise ExternalServiceError(
                message=f"Product events function failed for product {product.id}",
                service_name="Lambda",
                error_code="EVENT_HANDLER_FAILED",
            )

        metrics.add_metric(name="ProductEventSent", unit=MetricUnit.Count, value=1)
        logger.debug("Product event sent", extra={"product_id": product.id, "event_type": event_type.value})
        return payload
