"""
Customer notifications and billing records derived from order events.

Nothing is delivered from here: the order e-mails and billing functions
log what they build.
"""

from typing import Any, Dict

from service.models.events import OrderEvent, OrderEventType

_SUBJECTS = {
    OrderEventType.CREATED.value: 'Your order {order_id} was received',
    OrderEventType.DELETED.value: 'Your order {order_id} was cancelled',
}


def build_order_email(event: OrderEvent, event_type: str) -> Dict[str, Any]:
    """
    Build the e-mail sent to the customer for an order event.

    Raises:
        ValueError: If the event type has no notification
    """
    subject = _SUBJECTS.get(event_type)
    if subject is None:
        raise ValueError(f"No notification for event type {event_type}")

    lines = [
        f"Order: {event.order_id}",
        f"Products: {', '.join(event.product_codes)}",
        f"Total: {event.billing.total_price:.2f} ({event.billing.payment.value})",
        f"Shipping: {event.shipping.type.value} by {event.shipping.carrier.value}",
    ]
    return {
        'to': event.email,
        'subject': subject.format(order_id=event.order_id),
        'body': '\n'.join(lines),
        'eventType': event_type,
        'requestId': event.request_id,
    }


def build_billing_record(event: OrderEvent) -> Dict[str, Any]:
    return {
        'orderId': event.order_id,
        'email': event.email,
        'payment': event.billing.payment.value,
        'totalPrice': event.billing.total_price,
        'requestId': event.request_id,
    }
