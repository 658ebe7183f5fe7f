"""
Environment variable models for type-safe configuration.

Each Lambda function reads its settings through one of these models. The
stacks in ``infra/stacks`` set the variables; tests set them in
``tests/conftest.py``.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field


class ObservabilityEnvVars(BaseModel):
    """Settings shared by every function."""

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'ecommerce'

    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    # Local DynamoDB endpoint, unset in AWS
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        description='DynamoDB endpoint URL override for local testing'
    )] = None


class ProductsEnvVars(ObservabilityEnvVars):
    """Environment of ProductsFunction."""

    PRODUCTS_DDB: Annotated[str, Field(
        min_length=1,
        description='Products table name'
    )]

    PRODUCT_EVENTS_FUNCTION_NAME: Annotated[str, Field(
        min_length=1,
        description='Name of the function storing product events'
    )]

    PRODUCT_EVENTS_EMAIL: Annotated[str, Field(
        min_length=3,
        description='Email recorded as author of the catalog changes'
    )] = 'catalog@ecommerce.example.com'


class OrdersEnvVars(ObservabilityEnvVars):
    """Environment of OrdersFunction."""

    PRODUCTS_DDB: Annotated[str, Field(
        min_length=1,
        description='Products table name'
    )]

    ORDERS_DDB: Annotated[str, Field(
        min_length=1,
        description='Orders table name'
    )]

    ORDER_EVENTS_TOPIC_ARN: Annotated[str, Field(
        pattern=r'^arn:aws[a-zA-Z-]*:sns:',
        description='ARN of the order events topic'
    )]


class EventsEnvVars(ObservabilityEnvVars):
    """Environment of the functions reading or writing the events table."""

    EVENTS_DDB: Annotated[str, Field(
        min_length=1,
        description='Events table name'
    )]
