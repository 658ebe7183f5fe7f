"""
Product events function stack.
"""
from aws_cdk import (
    Stack,
    aws_dynamodb as dynamodb,
)
from constructs import Construct

from infra.stacks.python_function import python_function


class ProductEventsFunctionStack(Stack):
    """Function storing the product events sent by the products function."""

    def __init__(self, scope: Construct, construct_id: str, events_table: dynamodb.ITable, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.handler = python_function(
            self, 'ProductEventsFunction',
            entry_dir='product_events',
            environment={'EVENTS_DDB': events_table.table_name},
        )

        events_table.grant_write_data(self.handler)
