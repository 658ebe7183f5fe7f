"""
Data Access Layer (DAL) for the e-commerce service.

This module exposes factory functions for the table handlers used by the
logic layer. Handlers are built per invocation from the configured table
name so that every request talks to the table named in its environment.
"""

from typing import Optional

from service.dal.dynamodb_handler import ConditionalCheckFailedError, DALError, DynamoDBHandler
from service.dal.events_db import EventsDbHandler
from service.dal.orders_db import OrdersDbHandler
from service.dal.products_db import ProductsDbHandler


def get_products_dal(table_name: str, endpoint_url: Optional[str] = None) -> ProductsDbHandler:
    """Return the products table handler."""
    return ProductsDbHandler(table_name, endpoint_url=endpoint_url)


def get_orders_dal(table_name: str, endpoint_url: Optional[str] = None) -> OrdersDbHandler:
    """Return the orders table handler."""
    return OrdersDbHandler(table_name, endpoint_url=endpoint_url)


def get_events_dal(table_name: str, endpoint_url: Optional[str] = None) -> EventsDbHandler:
    """Return the events table handler."""
    return EventsDbHandler(table_name, endpoint_url=endpoint_url)


__all__ = [
    'ConditionalCheckFailedError',
    'DALError',
    'DynamoDBHandler',
    'EventsDbHandler',
    'OrdersDbHandler',
    'ProductsDbHandler',
    'get_events_dal',
    'get_orders_dal',
    'get_products_dal',
]
