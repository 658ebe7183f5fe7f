"""
Products Handler - Lambda function for the product catalog API.

Routes:
    GET    /products
    POST   /products
    GET    /products/<product_id>
    PUT    /products/<product_id>
    DELETE /products/<product_id>
"""

from typing import Any, Dict

from aws_lambda_env_modeler import get_environment_variables
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_products_dal
from service.events.product_events_invoker import ProductEventsInvoker
from service.handlers.models.env_vars import ProductsEnvVars
from service.handlers.utils.errors import create_api_response
from service.handlers.utils.observability import logger, metrics, tracer
from service.handlers.utils.rest_api_resolver import PRODUCTS_PATH, build_resolver, get_request_ids, parse_body
from service.logic.product_service import ProductService
from service.models.product import CreateProductRequest, UpdateProductRequest

app = build_resolver()


def get_product_service() -> ProductService:
    env_vars = get_environment_variables(model=ProductsEnvVars)
    return ProductService(
        products_dal=get_products_dal(env_vars.PRODUCTS_DDB, endpoint_url=env_vars.DYNAMODB_ENDPOINT),
        events_invoker=ProductEventsInvoker(
            function_name=env_vars.PRODUCT_EVENTS_FUNCTION_NAME,
            email=env_vars.PRODUCT_EVENTS_EMAIL,
        ),
    )


@app.get(PRODUCTS_PATH)
@tracer.capture_method
def list_products():
    logger.info(f'GET {PRODUCTS_PATH}')
    products = get_product_service().list_products()
    return create_api_response(200, [product.to_dict() for product in products])


@app.post(PRODUCTS_PATH)
@tracer.capture_method
def create_product():
    """Create a product and report ``PRODUCT_CREATED``."""
    logger.info(f'POST {PRODUCTS_PATH}')
    request = parse_body(app, CreateProductRequest)
    _, lambda_request_id = get_request_ids(app)

    product = get_product_service().create_product(request, lambda_request_id)
    tracer.put_annotation("product_id", product.id)
    return create_api_response(201, product.to_dict())


@app.get(f'{PRODUCTS_PATH}/<product_id>')
@tracer.capture_method
def get_product(product_id: str):
    logger.info(f'GET {PRODUCTS_PATH}/{product_id}')
    product = get_product_service().get_product(product_id)
    return create_api_response(200, product.to_dict())


@app.put(f'{PRODUCTS_PATH}/<product_id>')
@tracer.capture_method
def update_product(product_id: str):
    """Replace a product's attributes; 404 when the product does not exist."""
    logger.info(f'PUT {PRODUCTS_PATH}/{product_id}')
    request = parse_body(app, UpdateProductRequest)
    _, lambda_request_id = get_request_ids(app)

    product = get_product_service().update_product(product_id, request, lambda_request_id)
    return create_api_response(200, product.to_dict())


@app.delete(f'{PRODUCTS_PATH}/<product_id>')
@tracer.capture_method
def delete_product(product_id: str):
    logger.info(f'DELETE {PRODUCTS_PATH}/{product_id}')
    _, lambda_request_id = get_request_ids(app)

    get_product_service().delete_product(product_id, lambda_request_id)
    return create_api_response(204)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway REST event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    api_request_id = event.get('requestContext', {}).get('requestId')
    logger.info(f'API Gateway RequestId: {api_request_id} - Lambda RequestId: {context.aws_request_id}')
    return app.resolve(event, context)
