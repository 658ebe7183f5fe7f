"""
DynamoDB access to the events table.

Product and order events share the table. The ``emailIdx`` global secondary
index (partition key ``email``, sort key ``sk``) serves the order events
lookups by customer.
"""

from typing import List

from boto3.dynamodb.conditions import Key

from service.dal.dynamodb_handler import DynamoDBHandler
from service.handlers.utils.observability import tracer
from service.models.events import ORDER_EVENT_PREFIX, OrderEventDdb, ProductEventDdb

EMAIL_INDEX_NAME = 'emailIdx'


class EventsDbHandler(DynamoDBHandler):
    """Events table keyed by ``pk`` (entity) and ``sk`` (event type and timestamp)."""

    @tracer.capture_method
    def create_product_event(self, event: ProductEventDdb) -> ProductEventDdb:
        self.put_item(event.to_dict())
        return event

    @tracer.capture_method
    def create_order_event(self, event: OrderEventDdb) -> OrderEventDdb:
        self.put_item(event.to_dict())
        return event

    @tracer.capture_method
    def get_order_events_by_email(self, email: str, event_type_prefix: str = ORDER_EVENT_PREFIX) -> List[OrderEventDdb]:
        """
        Return the order events of a customer.

        Args:
            email: Customer email
            event_type_prefix: Sort key prefix, an order event type or ``ORDER_`` for all of them

        Returns:
            Matching events in sort key order
        """
        items = self.query_items(
            Key('email').eq(email) & Key('sk').begins_with(event_type_prefix),
            index_name=EMAIL_INDEX_NAME,
        )
        return [OrderEventDdb.model_validate(item) for item in items]
