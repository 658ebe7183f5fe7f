"""
CDK stacks of the e-commerce service, in deployment order.
"""

from infra.stacks.ecommerce_api_stack import ECommerceApiStack
from infra.stacks.events_ddb_stack import EventsDdbStack
from infra.stacks.orders_application_stack import OrdersApplicationStack
from infra.stacks.product_events_function_stack import ProductEventsFunctionStack
from infra.stacks.products_app_stack import ProductsAppStack

__all__ = [
    'ECommerceApiStack',
    'EventsDdbStack',
    'OrdersApplicationStack',
    'ProductEventsFunctionStack',
    'ProductsAppStack',
]
