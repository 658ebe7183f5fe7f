"""
Orders Handler - Lambda function for the orders API.

GET and DELETE select orders through the ``email`` and ``orderId`` query
string parameters; POST places a new order priced from the catalog.
"""

from typing import Any, Dict

from aws_lambda_env_modeler import get_environment_variables
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_orders_dal, get_products_dal
from service.events.order_events_publisher import OrderEventsPublisher
from service.handlers.models.env_vars import OrdersEnvVars
from service.handlers.utils.errors import ValidationError, create_api_response
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.rest_api_resolver import ORDERS_PATH, build_resolver, get_request_ids, parse_body
from service.logic.order_service import OrderService
from service.models.order import CreateOrderRequest, OrderResponse

app = build_resolver()


def get_order_service() -> OrderService:
    env_vars = get_environment_variables(model=OrdersEnvVars)
    return OrderService(
        orders_dal=get_orders_dal(env_vars.ORDERS_DDB, endpoint_url=env_vars.DYNAMODB_ENDPOINT),
        products_dal=get_products_dal(env_vars.PRODUCTS_DDB, endpoint_url=env_vars.DYNAMODB_ENDPOINT),
        publisher=OrderEventsPublisher(topic_arn=env_vars.ORDER_EVENTS_TOPIC_ARN),
    )


@app.get(ORDERS_PATH)
@tracer.capture_method
def get_orders():
    """
    Get all orders, the orders of a customer or one order.

    Query parameters:
        email: Customer email, required as soon as any parameter is sent
        orderId: Order id, selects a single order of ``email``
    """
    logger.info(f'GET {ORDERS_PATH}')
    params = app.current_event.query_string_parameters
    service = get_order_service()

    if not params:
        orders = service.list_orders()
        return create_api_response(200, [OrderResponse.from_order(order).to_dict() for order in orders])

    email = params.get('email')
    if not email:
        raise ValidationError()

    order_id = params.get('orderId')
    if order_id:
        order = service.get_order(email, order_id)
        return create_api_response(200, OrderResponse.from_order(order).to_dict())

    orders = service.list_orders(email)
    return create_api_response(200, [OrderResponse.from_order(order).to_dict() for order in orders])


@app.post(ORDERS_PATH)
@tracer.capture_method
def create_order():
    logger.info(f'POST {ORDERS_PATH}')
    request = parse_body(app, CreateOrderRequest)
    _, lambda_request_id = get_request_ids(app)

    order = get_order_service().create_order(request, lambda_request_id)
    tracer.put_annotation("order_id", order.order_id)
    return create_api_response(201, OrderResponse.from_order(order).to_dict())


@app.delete(ORDERS_PATH)
@tracer.capture_method
def delete_order():
    """Delete the order selected by ``email`` and ``orderId``."""
    logger.info(f'DELETE {ORDERS_PATH}')
    params = app.current_event.query_string_parameters or {}
    email = params.get('email')
    order_id = params.get('orderId')
    if not email or not order_id:
        raise ValidationError()

    _, lambda_request_id = get_request_ids(app)
    get_order_service().delete_order(email, order_id, lambda_request_id)
    return create_api_response(204)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    api_request_id = event.get('requestContext', {}).get('requestId')
    logger.info(f'API Gateway RequestId: {api_request_id} - Lambda RequestId: {context.aws_request_id}')
    return app.resolve(event, context)
