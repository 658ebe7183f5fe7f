"""
Business logic of the events table: audit records for product and order
events, and the order event history of a customer.
"""

from typing import List, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.dal.events_db import EventsDbHandler
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.events import (
    ORDER_EVENT_PREFIX,
    OrderEvent,
    OrderEventDdb,
    OrderEventResponse,
    ProductEvent,
    ProductEventDdb,
)


@tracer.capture_method
def store_product_event(events_dal: EventsDbHandler, event: ProductEvent) -> ProductEventDdb:
    record = events_dal.create_product_event(ProductEventDdb.from_event(event))
    logger.info("Product event stored", extra={
        "pk": record.pk,
        "sk": record.sk,
        "request_id": event.request_id,
    })
    metrics.add_metric(name="ProductEventStored", unit=MetricUnit.Count, value=1)
    return record


@tracer.capture_method
def store_order_event(events_dal: EventsDbHandler, event: OrderEvent, event_type: str, message_id: str) -> OrderEventDdb:
    """
    Store the audit record of an order event received from the topic.

    Args:
        events_dal: Events table handler
        event: Order event parsed from the message body
        event_type: ``eventType`` message attribute
        message_id: SNS message id, kept in the record info

    Returns:
        The stored record
    """
    record = events_dal.create_order_event(OrderEventDdb.from_event(event, event_type, message_id))
    logger.info("Order event stored", extra={
        "pk": record.pk,
        "sk": record.sk,
        "message_id": message_id,
    })
    metrics.add_metric(name="OrderEventStored", unit=MetricUnit.Count, value=1)
    return record


@tracer.capture_method
def get_order_events(events_dal: EventsDbHandler, email: str, event_type: Optional[str] = None) -> List[OrderEventResponse]:
    """Return the order events of ``email``, optionally limited to one event type."""
    records = events_dal.get_order_events_by_email(email, event_type or ORDER_EVENT_PREFIX)
    logger.debug(f'Found {len(records)} order events', extra={"event_type": event_type})
    return [OrderEventResponse.from_record(record) for record in records]
