"""
Product and order event models.

Product events travel as the payload of a synchronous Lambda invoke, order
events as the body of an SNS message whose ``eventType`` message attribute
drives the subscription filters. Both end up in the events table, keyed by
entity and by event type plus timestamp, and expire after a few minutes.
"""

import time
from enum import Enum
from typing import Annotated, Dict, List

from pydantic import BaseModel, Field

from service.models.base import CamelModel
from service.models.order import Billing, Order, Shipping

# Events table records expire five minutes after being written
EVENT_TTL_SECONDS = 5 * 60

ORDER_EVENT_PREFIX = 'ORDER_'


class ProductEventType(str, Enum):
    """Product lifecycle events."""

    CREATED = 'PRODUCT_CREATED'
    UPDATED = 'PRODUCT_UPDATED'
    DELETED = 'PRODUCT_DELETED'


class OrderEventType(str, Enum):
    """Order lifecycle events."""

    CREATED = 'ORDER_CREATED'
    DELETED = 'ORDER_DELETED'


class ProductEvent(CamelModel):
    """Payload sent by the products function to the product events function."""

    request_id: str
    event_type: ProductEventType
    product_id: str
    product_code: str
    product_price: float
    email: str


class OrderEvent(CamelModel):
    """Body of the messages published on the order events topic."""

    email: str
    order_id: str
    shipping: Shipping
    billing: Billing
    product_codes: List[str]
    request_id: str

    @classmethod
    def from_order(cls, order: Order, request_id: str) -> 'OrderEvent':
        return cls(
            email=order.email,
            order_id=order.order_id,
            shipping=order.shipping,
            billing=order.billing,
            product_codes=order.product_codes(),
            request_id=request_id,
        )


class EventRecordBase(CamelModel):
    """Attributes shared by every events table record."""

    pk: Annotated[str, Field(description='Entity key, "#order_<id>" or "#product_<code>"')]
    sk: Annotated[str, Field(description='"<eventType>#<epoch millis>"')]
    ttl: Annotated[int, Field(description='Expiry time in epoch seconds')]
    email: str
    created_at: Annotated[int, Field(description='Epoch milliseconds')]
    request_id: str
    event_type: str


class ProductEventInfo(CamelModel):
    product_id: str
    price: float


class ProductEventDdb(EventRecordBase):
    """Product event stored in the events table."""

    info: ProductEventInfo

    @classmethod
    def from_event(cls, event: ProductEvent) -> 'ProductEventDdb':
        timestamp = int(time.time() * 1000)
        return cls(
            pk=f'#product_{event.product_code}',
            sk=f'{event.event_type.value}#{timestamp}',
            ttl=timestamp // 1000 + EVENT_TTL_SECONDS,
            email=event.email,
            created_at=timestamp,
            request_id=event.request_id,
            event_type=event.event_type.value,
            info=ProductEventInfo(product_id=event.product_id, price=event.product_price),
        )


class OrderEventInfo(CamelModel):
    order_id: str
    product_codes: List[str] = []
    message_id: str


class OrderEventDdb(EventRecordBase):
    """Order event stored in the events table."""

    info: OrderEventInfo

    @classmethod
    def from_event(cls, event: OrderEvent, event_type: str, message_id: str) -> 'OrderEventDdb':
        """
        Build the audit record of an order event.

        Args:
            event: Order event parsed from the SNS message body
            event_type: Value of the ``eventType`` message attribute
            message_id: SNS message identifier

        Returns:
            Record keyed by order id and by event type plus timestamp
        """
        timestamp = int(time.time() * 1000)
        return cls(
            pk=f'#order_{event.order_id}',
            sk=f'{event_type}#{timestamp}',
            ttl=timestamp // 1000 + EVENT_TTL_SECONDS,
            email=event.email,
            created_at=timestamp,
            request_id=event.request_id,
            event_type=event_type,
            info=OrderEventInfo(
                order_id=event.order_id,
                product_codes=event.product_codes,
                message_id=message_id,
            ),
        )


class OrderEventResponse(CamelModel):
    """Order event as returned by ``GET /orders/events``."""

    email: str
    created_at: int
    event_type: str
    request_id: str
    order_id: str
    product_codes: List[str]

    @classmethod
    def from_record(cls, record: OrderEventDdb) -> 'OrderEventResponse':
        return cls(
            email=record.email,
            created_at=record.created_at,
            event_type=record.event_type,
            request_id=record.request_id,
            order_id=record.info.order_id,
            product_codes=record.info.product_codes,
        )


class SnsMessageAttribute(BaseModel):
    Type: str
    Value: str


class SnsEnvelope(BaseModel):
    """SNS notification as delivered in the body of an SQS message."""

    MessageId: str
    Message: str
    MessageAttributes: Dict[str, SnsMessageAttribute] = {}

    def event_type(self) -> str:
        """Return the ``eventType`` message attribute."""
        attribute = self.MessageAttributes.get('eventType')
        if attribute is None:
            raise ValueError(f"Message {self.MessageId} has no eventType attribute")
        return attribute.Value

    def order_event(self) -> OrderEvent:
        return OrderEvent.model_validate_json(self.Message)
