"""
Event delivery for the e-commerce service.

Product events are delivered by a synchronous invoke of the product events
function; order events are published on the order events SNS topic.
"""

from .order_events_publisher import OrderEventsPublisher, PublishResult
from .product_events_invoker import ProductEventsInvoker

__all__ = [
    'OrderEventsPublisher',
    'ProductEventsInvoker',
    'PublishResult',
]
