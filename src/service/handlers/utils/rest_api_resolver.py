"""
REST API resolver utility for the HTTP Lambda handlers.

Every HTTP function builds its resolver here so that they all share the
same error contract: the body of an error response holds a ``message`` and
the API Gateway and Lambda request identifiers, unknown routes answer 400
``Bad request`` and missing resources answer 404.
"""

from typing import Tuple, Type, TypeVar

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig, Response
from aws_lambda_powertools.event_handler.exceptions import NotFoundError
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from service.handlers.utils.errors import (
    BaseServiceError,
    ValidationError,
    create_error_response,
    get_http_status_code,
    log_error_metrics,
)
from service.handlers.utils.observability import logger, metrics

# API path constants
PRODUCTS_PATH = '/products'
ORDERS_PATH = '/orders'
ORDER_EVENTS_PATH = '/orders/events'

BAD_REQUEST_MESSAGE = 'Bad request'

ModelT = TypeVar('ModelT', bound=BaseModel)

cors_config = CORSConfig(
    allow_origin="*",
    max_age=600,
    allow_headers=["content-type"],
)


def get_request_ids(app: APIGatewayRestResolver) -> Tuple[str, str]:
    """Return the API Gateway and Lambda request ids of the current invocation."""
    request_context = app.current_event.request_context
    api_request_id = request_context.request_id if request_context else "unknown"
    return api_request_id, app.lambda_context.aws_request_id


def parse_body(app: APIGatewayRestResolver, model: Type[ModelT]) -> ModelT:
    """
    Validate the JSON body of the current request.

    Raises:
        ValidationError: If the body is missing, not valid JSON or does not match ``model``
    """
    body = app.current_event.body
    if not body:
        raise ValidationError()
    try:
        return model.model_validate_json(body)
    except PydanticValidationError as e:
        field_errors = [
            {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"]} for error in e.errors()
        ]
        logger.info("Request validation failed", extra={"field_errors": field_errors})
        raise ValidationError(field_errors=field_errors) from e


def build_resolver() -> APIGatewayRestResolver:
    """Create a REST resolver with the shared error responses registered."""
    app = APIGatewayRestResolver(cors=cors_config)

    def error_response(status_code: int, message: str) -> Response:
        api_request_id, lambda_request_id = get_request_ids(app)
        return create_error_response(status_code, message, api_request_id, lambda_request_id)

    @app.not_found
    def handle_unknown_route(exc: NotFoundError) -> Response:
        logger.warning("Unsupported route", extra={
            "method": app.current_event.http_method,
            "path": app.current_event.path,
        })
        metrics.add_metric(name="BadRequest", unit=MetricUnit.Count, value=1)
        return error_response(400, BAD_REQUEST_MESSAGE)

    @app.exception_handler(BaseServiceError)
    def handle_service_error(exc: BaseServiceError) -> Response:
        log_error_metrics(exc)
        return error_response(get_http_status_code(exc), exc.message)

    @app.exception_handler(Exception)
    def handle_unexpected_error(exc: Exception) -> Response:
        logger.exception("Unexpected error in handler")
        metrics.add_metric(name="UnexpectedError", unit=MetricUnit.Count, value=1)
        return error_response(500, "Internal server error")

    return app
