"""
Billing Handler - SNS subscriber receiving the ``ORDER_CREATED`` events.
"""

from typing import Any, Dict

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import SNSEvent, event_source
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.notifications import build_billing_record
from service.models.events import OrderEvent, OrderEventType


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=SNSEvent)
def lambda_handler(event: SNSEvent, context: LambdaContext) -> Dict[str, Any]:
    """
    Log a billing record for each created order.

    The subscription filter only lets ``ORDER_CREATED`` through; any other
    event type is skipped.
    """
    billed = 0
    for record in event.records:
        message = record.sns
        event_type = message.message_attributes['eventType'].value
        if event_type != OrderEventType.CREATED.value:
            logger.warning("Skipping event without billing", extra={"event_type": event_type})
            continue

        billing_record = build_billing_record(OrderEvent.model_validate_json(message.message))
        logger.info("Billing record", extra={"billing": billing_record, "message_id": message.message_id})
        metrics.add_metric(name="OrderBilled", unit=MetricUnit.Count, value=1)
        billed += 1

    return {"billed": billed}
