"""
Events table stack.

Product and order events expire through the ``ttl`` attribute; the
``emailIdx`` index serves the order event history of a customer.
"""
from aws_cdk import (
    RemovalPolicy,
    Stack,
    aws_dynamodb as dynamodb,
)
from constructs import Construct


class EventsDdbStack(Stack):
    """DynamoDB table holding product and order events."""

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.table = dynamodb.Table(
            self, 'EventsDdb',
            table_name='events',
            removal_policy=RemovalPolicy.DESTROY,
            partition_key=dynamodb.Attribute(name='pk', type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name='sk', type=dynamodb.AttributeType.STRING),
            time_to_live_attribute='ttl',
            billing_mode=dynamodb.BillingMode.PROVISIONED,
            read_capacity=1,
            write_capacity=1,
        )

        self.table.add_global_secondary_index(
            index_name='emailIdx',
            partition_key=dynamodb.Attribute(name='email', type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name='sk', type=dynamodb.AttributeType.STRING),
            projection_type=dynamodb.ProjectionType.ALL,
            read_capacity=1,
            write_capacity=1,
        )
