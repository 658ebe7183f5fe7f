"""
DynamoDB access to the orders table.

Orders are keyed by customer email (``pk``) and order id (``sk``), so the
orders of one customer are a single partition query.
"""

from typing import List, Optional

from boto3.dynamodb.conditions import Key

from service.dal.dynamodb_handler import DynamoDBHandler
from service.handlers.utils.observability import logger, tracer
from service.models.order import Order


class OrdersDbHandler(DynamoDBHandler):
    """Orders table keyed by ``pk`` (email) and ``sk`` (order id)."""

    @tracer.capture_method
    def create_order(self, order: Order) -> Order:
        self.put_item(order.to_dict())
        logger.info(f'Order stored: {order.order_id}')
        tracer.put_annotation('order_created', order.order_id)
        return order

    @tracer.capture_method
    def get_all_orders(self) -> List[Order]:
        return [Order.model_validate(item) for item in self.scan_items()]

    @tracer.capture_method
    def get_orders_by_email(self, email: str) -> List[Order]:
        items = self.query_items(Key('pk').eq(email))
        return [Order.model_validate(item) for item in items]

    @tracer.capture_method
    def get_order(self, email: str, order_id: str) -> Optional[Order]:
        item = self.get_item({'pk': email, 'sk': order_id})
        return Order.model_validate(item) if item else None

    @tracer.capture_method
    def delete_order(self, email: str, order_id: str) -> Optional[Order]:
        item = self.delete_item({'pk': email, 'sk': order_id})
        return Order.model_validate(item) if item else None
