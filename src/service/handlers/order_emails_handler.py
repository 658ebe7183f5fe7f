"""
Order E-mails Handler - SQS consumer building the customer notification of
each order event.

Records are processed with partial batch responses: only the records that
fail go back to the queue, and reach the dead-letter queue after three
receives.
"""

from typing import Any, Dict

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.batch import BatchProcessor, EventType, process_partial_response
from aws_lambda_powertools.utilities.data_classes.sqs_event import SQSRecord
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.notifications import build_order_email
from service.models.events import SnsEnvelope

processor = BatchProcessor(event_type=EventType.SQS)


@tracer.capture_method
def record_handler(record: SQSRecord) -> Dict[str, Any]:
    envelope = SnsEnvelope.model_validate_json(record.body)
    email = build_order_email(envelope.order_event(), envelope.event_type())

    logger.info("Order e-mail", extra={
        "sqs_message_id": record.message_id,
        "sns_message_id": envelope.MessageId,
        "notification": email,
    })
    metrics.add_metric(name="OrderEmailBuilt", unit=MetricUnit.Count, value=1)
    return email


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return process_partial_response(
        event=event,
        record_handler=record_handler,
        processor=processor,
        context=context,
    )
