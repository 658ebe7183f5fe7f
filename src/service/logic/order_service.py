"""
Business logic for order placement.

Orders are priced from the catalog at creation time: every requested
product id must exist, and each occurrence of an id adds one line with the
current product code and price. Creations and deletions are announced on
the order events topic.
"""

from typing import List, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.dal.orders_db import OrdersDbHandler
from service.dal.products_db import ProductsDbHandler
from service.events.order_events_publisher import OrderEventsPublisher
from service.handlers.utils.errors import ErrorContext, ResourceNotFoundError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.events import OrderEvent, OrderEventType
from service.models.order import CreateOrderRequest, Order


class OrderNotFoundError(ResourceNotFoundError):
    """Raised when an order is not found."""

    def __init__(self, order_id: str, context: Optional[ErrorContext] = None):
        super().__init__(
            resource_type="Order",
            resource_id=order_id,
            context=context,
        )


class ProductsNotFoundError(ResourceNotFoundError):
    """Raised when an order references products missing from the catalog."""

    def __init__(self, missing_ids: List[str], context: Optional[ErrorContext] = None):
        super().__init__(
            resource_type="Product",
            message="Some product was not found",
            context=context,
        )
        self.missing_ids = missing_ids


class OrderService:
    """Business logic service for order management."""

    def __init__(
        self,
        orders_dal: OrdersDbHandler,
        products_dal: ProductsDbHandler,
        publisher: OrderEventsPublisher,
    ):
        self.orders_dal = orders_dal
        self.products_dal = products_dal
        self.publisher = publisher

    @tracer.capture_method
    def list_orders(self, email: Optional[str] = None) -> List[Order]:
        """Return every order, or the orders of one customer."""
        if email is None:
            return self.orders_dal.get_all_orders()
        return self.orders_dal.get_orders_by_email(email)

    @tracer.capture_method
    def get_order(self, email: str, order_id: str) -> Order:
        order = self.orders_dal.get_order(email, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    @tracer.capture_method
    def create_order(self, request: CreateOrderRequest, lambda_request_id: str) -> Order:
        """
        Price, store and announce a new order.

        Args:
            request: Validated order request
            lambda_request_id: Request id carried by the ``ORDER_CREATED`` event

        Returns:
            The stored order

        Raises:
            ProductsNotFoundError: If any requested product id is unknown
        """
        products = self.products_dal.get_products_by_ids(request.product_ids)
        found_ids = {product.id for product in products}
        missing_ids = sorted(set(request.product_ids) - found_ids)
        if missing_ids:
            logger.warning("Order references unknown products", extra={"missing_ids": missing_ids})
            raise ProductsNotFoundError(missing_ids)

        order = self.orders_dal.create_order(Order.create(request, products))
        logger.info("Order created", extra={
            "order_id": order.order_id,
            "items": len(order.products),
            "total_price": order.billing.total_price,
        })
        metrics.add_metric(name="OrderCreated", unit=MetricUnit.Count, value=1)

        self.publisher.publish(OrderEvent.from_order(order, lambda_request_id), OrderEventType.CREATED)
        return order

    @tracer.capture_method
    def delete_order(self, email: str, order_id: str, lambda_request_id: str) -> Order:
        """
        Delete an order and announce ``ORDER_DELETED``.

        Raises:
            OrderNotFoundError: If the customer has no such order
        """
        order = self.orders_dal.delete_order(email, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        logger.info("Order deleted", extra={"order_id": order_id})
        metrics.add_metric(name="OrderDeleted", unit=MetricUnit.Count, value=1)

        self.publisher.publish(OrderEvent.from_order(order, lambda_request_id), OrderEventType.DELETED)
        return order
