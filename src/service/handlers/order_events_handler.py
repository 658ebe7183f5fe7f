"""
Order Events Handler - SNS subscriber writing every order event to the
events table.

Failures propagate so that SNS retries the delivery.
"""

from typing import Any, Dict

from aws_lambda_env_modeler import get_environment_variables
from aws_lambda_powertools.utilities.data_classes import SNSEvent, event_source
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_events_dal
from service.handlers.models.env_vars import EventsEnvVars
from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.event_service import store_order_event
from service.models.events import OrderEvent


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=SNSEvent)
def lambda_handler(event: SNSEvent, context: LambdaContext) -> Dict[str, Any]:
    env_vars = get_environment_variables(model=EventsEnvVars)
    events_dal = get_events_dal(env_vars.EVENTS_DDB, endpoint_url=env_vars.DYNAMODB_ENDPOINT)

    stored = 0
    for record in event.records:
        message = record.sns
        event_type = message.message_attributes['eventType'].value
        logger.info("Order event received", extra={"message_id": message.message_id, "event_type": event_type})

        order_event = OrderEvent.model_validate_json(message.message)
        store_order_event(events_dal, order_event, event_type, message.message_id)
        stored += 1

    return {"stored": stored}
