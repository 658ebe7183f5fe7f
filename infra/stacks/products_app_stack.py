"""
Products application stack: products table and ProductsFunction.
"""
from aws_cdk import (
    RemovalPolicy,
    Stack,
    aws_dynamodb as dynamodb,
    aws_lambda as lambda_,
)
from constructs import Construct

from infra.stacks.python_function import python_function


class ProductsAppStack(Stack):
    """Product catalog table and its API function."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        product_events_function: lambda_.IFunction,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # Products Table
        # =================================================================

        self.table = dynamodb.Table(
            self, 'ProductsDdb',
            table_name='products',
            removal_policy=RemovalPolicy.DESTROY,
            partition_key=dynamodb.Attribute(name='id', type=dynamodb.AttributeType.STRING),
            billing_mode=dynamodb.BillingMode.PROVISIONED,
            read_capacity=1,
            write_capacity=1,
        )

        # =================================================================
        # Products Function
        # =================================================================

        self.handler = python_function(
            self, 'ProductsFunction',
            entry_dir='products',
            timeout_seconds=10,
            environment={
                'PRODUCTS_DDB': self.table.table_name,
                'PRODUCT_EVENTS_FUNCTION_NAME': product_events_function.function_name,
            },
        )

        self.table.grant_read_write_data(self.handler)
        product_events_function.grant_invoke(self.handler)
