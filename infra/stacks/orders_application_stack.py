"""
Orders application stack.

OrdersFunction stores orders and publishes their events on the
``order-events`` topic, which fans out to:

- OrderEventsFunction: every event, stored in the events table
- BillingFunction: ``ORDER_CREATED`` only
- ``order-events`` queue: ``ORDER_CREATED`` and ``ORDER_DELETED``, consumed
  by OrderEmailsFunction, with a dead-letter queue after three receives

OrderEventsFetchFunction reads the order events back through ``emailIdx``.
"""
from aws_cdk import (
    Duration,
    RemovalPolicy,
    Stack,
    aws_dynamodb as dynamodb,
    aws_iam as iam,
    aws_lambda_event_sources as event_sources,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
    aws_sqs as sqs,
)
from constructs import Construct

from infra.stacks.python_function import python_function

ORDER_EVENT_TYPES = ['ORDER_CREATED', 'ORDER_DELETED']


class OrdersApplicationStack(Stack):
    """Orders table, order events topic and the functions around them."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        products_table: dynamodb.ITable,
        events_table: dynamodb.ITable,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # Orders Table and Topic
        # =================================================================

        self.table = dynamodb.Table(
            self, 'OrdersDdb',
            table_name='orders',
            removal_policy=RemovalPolicy.DESTROY,
            partition_key=dynamodb.Attribute(name='pk', type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name='sk', type=dynamodb.AttributeType.STRING),
            billing_mode=dynamodb.BillingMode.PROVISIONED,
            read_capacity=1,
            write_capacity=1,
        )

        self.topic = sns.Topic(
            self, 'OrderEventsTopic',
            display_name='Order events topic',
            topic_name='order-events',
        )

        # =================================================================
        # Orders Function
        # =================================================================

        self.handler = python_function(
            self, 'OrdersFunction',
            entry_dir='orders',
            environment={
                'PRODUCTS_DDB': products_table.table_name,
                'ORDERS_DDB': self.table.table_name,
                'ORDER_EVENTS_TOPIC_ARN': self.topic.topic_arn,
            },
        )

        products_table.grant_read_data(self.handler)
        self.table.grant_read_write_data(self.handler)
        self.topic.grant_publish(self.handler)

        # =================================================================
        # Order Events Function (all events)
        # =================================================================

        order_events_handler = python_function(
            self, 'OrderEventsFunction',
            entry_dir='order_events',
            environment={'EVENTS_DDB': events_table.table_name},
        )

        # Only order records, keyed "#order_<id>"
        order_events_handler.add_to_role_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=['dynamodb:PutItem'],
            resources=[events_table.table_arn],
            conditions={
                'ForAllValues:StringLike': {
                    'dynamodb:LeadingKeys': ['#order_*'],
                },
            },
        ))

        self.topic.add_subscription(subscriptions.LambdaSubscription(order_events_handler))

        # =================================================================
        # Billing Function (ORDER_CREATED)
        # =================================================================

        billing_handler = python_function(self, 'BillingFunction', entry_dir='billing')

        self.topic.add_subscription(subscriptions.LambdaSubscription(
            billing_handler,
            filter_policy={
                'eventType': sns.SubscriptionFilter.string_filter(allowlist=['ORDER_CREATED']),
            },
        ))

        # =================================================================
        # Order E-mails Queue and Function
        # =================================================================

        order_events_dlq = sqs.Queue(
            self, 'OrderEventsDlq',
            queue_name='order-events-dlq',
            enforce_ssl=False,
            encryption=sqs.QueueEncryption.UNENCRYPTED,
            retention_period=Duration.days(10),
        )

        self.queue = sqs.Queue(
            self, 'OrderEventsQueue',
            queue_name='order-events',
            enforce_ssl=False,
            encryption=sqs.QueueEncryption.UNENCRYPTED,
            dead_letter_queue=sqs.DeadLetterQueue(max_receive_count=3, queue=order_events_dlq),
        )

        self.topic.add_subscription(subscriptions.SqsSubscription(
            self.queue,
            filter_policy={
                'eventType': sns.SubscriptionFilter.string_filter(allowlist=ORDER_EVENT_TYPES),
            },
        ))

        order_emails_handler = python_function(self, 'OrderEmailsFunction', entry_dir='order_emails')

        order_emails_handler.add_event_source(event_sources.SqsEventSource(
            self.queue,
            batch_size=5,
            enabled=True,
            max_batching_window=Duration.minutes(1),
            report_batch_item_failures=True,
        ))
        self.queue.grant_consume_messages(order_emails_handler)

        # =================================================================
        # Order Events Fetch Function
        # =================================================================

        self.order_events_fetch_handler = python_function(
            self, 'OrderEventsFetchFunction',
            entry_dir='order_events_fetch',
            environment={'EVENTS_DDB': events_table.table_name},
        )

        self.order_events_fetch_handler.add_to_role_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=['dynamodb:Query'],
            resources=[f'{events_table.table_arn}/index/emailIdx'],
        ))
