"""
E-commerce service package.

Layers, from the outside in:

- handlers: Lambda entry points (API Gateway, SNS, SQS and direct invoke)
- logic: catalog, order and event business rules
- events: delivery of product and order events
- dal: DynamoDB access to the products, orders and events tables
- models: pydantic models of the wire and storage formats
"""

__version__ = "1.0.0"
