"""
Product Events Handler - stores the product events sent by the products
function through a synchronous invoke.
"""

from typing import Any, Dict

from aws_lambda_env_modeler import get_environment_variables
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_events_dal
from service.handlers.models.env_vars import EventsEnvVars
from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.event_service import store_product_event
from service.models.events import ProductEvent


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Store one product event in the events table.

    Args:
        event: Product event payload
        context: Lambda context object

    Returns:
        Acknowledgement returned to the invoking function
    """
    product_event = ProductEvent.model_validate(event)
    logger.info("Product event received", extra={
        "event_type": product_event.event_type.value,
        "product_id": product_event.product_id,
        "request_id": product_event.request_id,
    })

    env_vars = get_environment_variables(model=EventsEnvVars)
    events_dal = get_events_dal(env_vars.EVENTS_DDB, endpoint_url=env_vars.DYNAMODB_ENDPOINT)
    store_product_event(events_dal, product_event)

    return {"productEventCreated": True, "message": "OK"}
