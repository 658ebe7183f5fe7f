"""
SNS publisher for order lifecycle events.

Every message carries the order event JSON as its body and the event type
as the ``eventType`` string message attribute, which the subscriptions of
the billing function and of the order e-mails queue filter on.
"""

import time
from dataclasses import dataclass
from typing import Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from service.handlers.utils.errors import ExternalServiceError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.events import OrderEvent, OrderEventType


@dataclass
class PublishResult:
    """Result of an event publishing operation."""

    message_id: str
    event_type: str
    duration_ms: float = 0.0


class OrderEventsPublisher:
    """Publishes order events on the order events topic."""

    def __init__(self, topic_arn: str, region_name: Optional[str] = None):
        """
        Initialize the publisher.

        Args:
            topic_arn: ARN of the order events topic
            region_name: AWS region, defaults to the Lambda region
        """
        self.topic_arn = topic_arn
        client_kwargs = {'region_name': region_name} if region_name else {}
        self.sns = boto3.client('sns', **client_kwargs)

    @tracer.capture_method
    def publish(self, event: OrderEvent, event_type: OrderEventType) -> PublishResult:
        """
        Publish one order event.

        Args:
            event: Order event to publish
            event_type: Lifecycle event type, sent as message attribute

        Returns:
            PublishResult with the SNS message id

        Raises:
            ExternalServiceError: If SNS rejects the message
        """
        start_time = time.time()
        try:
            response = self.sns.publish(
                TopicArn=self.topic_arn,
                Message=event.model_dump_json(by_alias=True),
                MessageAttributes={
                    'eventType': {
                        'DataType': 'String',
                        'StringValue': event_type.value,
                    }
                },
            )
        except (ClientError, BotoCoreError) as e:
            metrics.add_metric(name="OrderEventPublishFailed", unit=MetricUnit.Count, value=1)
            logger.error("Failed to publish order event", extra={
                "order_id": event.order_id,
                "event_type": event_type.value,
                "error": str(e),
            })
            raise ExternalServiceError(
                message=f"Failed to publish {event_type.value} for order {event.order_id}",
                service_name="SNS",
                error_code="EVENT_PUBLISH_FAILED",
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        metrics.add_metric(name="OrderEventPublished", unit=MetricUnit.Count, value=1)
        logger.info("Order event published", extra={
            "order_id": event.order_id,
            "event_type": event_type.value,
            "message_id": response['MessageId'],
        })

        return PublishResult(
            message_id=response['MessageId'],
            event_type=event_type.value,
            duration_ms=duration_ms,
        )
