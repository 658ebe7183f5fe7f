#!/usr/bin/env python3
"""
CDK Application Entry Point

Deploys the e-commerce service: events table, product events function,
products application, orders application and the REST API.
"""
import os

import aws_cdk as cdk

from infra.stacks import (
    ECommerceApiStack,
    EventsDdbStack,
    OrdersApplicationStack,
    ProductEventsFunctionStack,
    ProductsAppStack,
)

TAGS = {
    'cost': 'ECommerce',
    'team': 'Inatel',
}


def build_app(app: cdk.App) -> cdk.App:
    """Add the service stacks to ``app`` with their deployment dependencies."""
    env = cdk.Environment(
        account=os.environ.get('CDK_DEFAULT_ACCOUNT'),
        region=os.environ.get('CDK_DEFAULT_REGION'),
    )

    events_ddb_stack = EventsDdbStack(app, 'EventsDdb', tags=TAGS, env=env)

    product_events_function_stack = ProductEventsFunctionStack(
        app, 'ProductEventsFunction',
        events_table=events_ddb_stack.table,
        tags=TAGS,
        env=env,
    )
    product_events_function_stack.add_dependency(events_ddb_stack)

    products_app_stack = ProductsAppStack(
        app, 'ProductsApp',
        product_events_function=product_events_function_stack.handler,
        tags=TAGS,
        env=env,
    )

    orders_app_stack = OrdersApplicationStack(
        app, 'OrdersApp',
        products_table=products_app_stack.table,
        events_table=events_ddb_stack.table,
        tags=TAGS,
        env=env,
    )
    orders_app_stack.add_dependency(products_app_stack)
    orders_app_stack.add_dependency(events_ddb_stack)

    ecommerce_api_stack = ECommerceApiStack(
        app, 'ECommerceApi',
        products_handler=products_app_stack.handler,
        orders_handler=orders_app_stack.handler,
        order_events_fetch_handler=orders_app_stack.order_events_fetch_handler,
        tags=TAGS,
        env=env,
    )
    ecommerce_api_stack.add_dependency(products_app_stack)
    ecommerce_api_stack.add_dependency(orders_app_stack)

    return app


if __name__ == '__main__':
    build_app(cdk.App()).synth()
