"""
Order Events Fetch Handler - Lambda function serving the order event history.
"""

from typing import Any, Dict

from aws_lambda_env_modeler import get_environment_variables
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_events_dal
from service.handlers.models.env_vars import EventsEnvVars
from service.handlers.utils.errors import ValidationError, create_api_response
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.rest_api_resolver import ORDER_EVENTS_PATH, build_resolver
from service.logic.event_service import get_order_events
from service.models.events import OrderEventType

app = build_resolver()


@app.get(ORDER_EVENTS_PATH)
@tracer.capture_method
def list_order_events():
    """
    List the order events of a customer.

    Query parameters:
        email: Customer email, required
        eventType: Optional order event type, ``ORDER_CREATED`` or ``ORDER_DELETED``
    """
    logger.info(f'GET {ORDER_EVENTS_PATH}')
    params = app.current_event.query_string_parameters or {}
    email = params.get('email')
    event_type = params.get('eventType')
    if not email:
        raise ValidationError()
    if event_type and event_type not in {member.value for member in OrderEventType}:
        raise ValidationError()

    env_vars = get_environment_variables(model=EventsEnvVars)
    events_dal = get_events_dal(env_vars.EVENTS_DDB, endpoint_url=env_vars.DYNAMODB_ENDPOINT)
    events = get_order_events(events_dal, email, event_type)
    return create_api_response(200, [event.to_dict() for event in events])


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    api_request_id = event.get('requestContext', {}).get('requestId')
    logger.info(f'API Gateway RequestId: {api_request_id} - Lambda RequestId: {context.aws_request_id}')
    return app.resolve(event, context)
