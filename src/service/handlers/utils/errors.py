"""
Error handling utilities for the e-commerce Lambda handlers.

Defines the service error hierarchy shared by the logic and data access
layers, and the helpers that turn those errors into API Gateway responses
carrying both the API Gateway and the Lambda request identifiers.
"""

import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.event_handler import Response, content_types
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from service.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class ErrorContext(BaseModel):
    """Context information for errors."""

    api_request_id: str = Field(description="API Gateway request identifier")
    lambda_request_id: str = Field(description="Lambda invocation identifier")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.model_dump(mode="json") if self.context else None,
        }


class ValidationError(BaseServiceError):
    """Raised when a request body or query string is not acceptable."""

    def __init__(
        self,
        message: str = "Bad request",
        field_errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.field_errors = field_errors or []


class ResourceNotFoundError(BaseServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message or f"{resource_type} not found",
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            context=context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ExternalServiceError(BaseServiceError):
    """Raised when a call to another AWS service fails."""

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.EXTERNAL_SERVICE,
            context=context,
        )
        self.service_name = service_name


def get_http_status_code(error: BaseServiceError) -> int:
    """Map a service error to its HTTP status code."""
    if isinstance(error, ResourceNotFoundError):
        return 404
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, ExternalServiceError):
        return 502
    return 500


def log_error_metrics(error: BaseServiceError) -> None:
    """Log a service error, attach it to the trace and count it by category."""
    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())
    log = logger.warning if error.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM) else logger.error
    log(error.message, extra={
        "error_id": error.error_id,
        "error_code": error.error_code,
        "error_severity": error.severity.value,
        "error_category": error.category.value,
    })
    metrics.add_metric(name=f"{error.category.value.title().replace('_', '')}Error", unit=MetricUnit.Count, value=1)


def create_api_response(
    status_code: int,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """
    Create an API Gateway response.

    Args:
        status_code: HTTP status code
        body: JSON-serializable body, or None for an empty body
        headers: Optional extra headers

    Returns:
        Powertools Response consumed by the resolver
    """
    return Response(
        status_code=status_code,
        content_type=content_types.APPLICATION_JSON,
        body=json.dumps(body) if body is not None else None,
        headers=headers,
    )


def create_error_response(status_code: int, message: str, api_request_id: str, lambda_request_id: str) -> Response:
    """
    Create the error response shared by every HTTP function.

    Args:
        status_code: HTTP status code
        message: Human readable error message
        api_request_id: API Gateway request identifier
        lambda_request_id: Lambda invocation identifier

    Returns:
        Response whose body holds the message and both request identifiers
    """
    return create_api_response(
        status_code=status_code,
        body={
            "message": message,
            "ApiGwRequestId": api_request_id,
            "LambdaRequestId": lambda_request_id,
        },
    )
