"""
Data Access Layer (DAL) base for DynamoDB operations.

This module wraps the boto3 table resource with consistent error
translation, tracing and metrics. The table specific handlers of the
products, orders and events tables build on it.
"""

import functools
import json
import time
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from service.handlers.utils.errors import (
    BaseServiceError,
    ErrorCategory,
    ErrorSeverity,
    ExternalServiceError,
)
from service.handlers.utils.observability import logger, metrics, tracer


class DALError(BaseServiceError):
    """Base exception for Data Access Layer errors."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "DAL_ERROR",
        severity: ErrorSeverity = ErrorSeverity.HIGH,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=severity,
            category=ErrorCategory.INFRASTRUCTURE,
        )
        self.operation = operation
        self.table_name = table_name


class ConditionalCheckFailedError(DALError):
    """Raised when a conditional write finds the item in the wrong state."""

    def __init__(self, table_name: str, operation: str):
        super().__init__(
            message=f"Conditional check failed on {table_name}",
            operation=operation,
            table_name=table_name,
            error_code="CONDITIONAL_CHECK_FAILED",
            severity=ErrorSeverity.LOW,
        )


def to_dynamodb_item(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert floats to Decimal, the only number type boto3 accepts."""
    return json.loads(json.dumps(data), parse_float=Decimal)


def handle_dynamodb_errors(operation: str) -> Callable:
    """Decorator translating botocore failures into DAL errors."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self: 'DynamoDBHandler', *args, **kwargs):
            operation_start = time.time()
            try:
                result = func(self, *args, **kwargs)
            except ClientError as e:
                error_code = e.response['Error']['Code']
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)

                if error_code == 'ConditionalCheckFailedException':
                    logger.info(f"DynamoDB {operation} condition not met", extra={"table_name": self.table_name})
                    raise ConditionalCheckFailedError(table_name=self.table_name, operation=operation) from e

                logger.error(f"DynamoDB {operation} error", extra={
                    "error_code": error_code,
                    "error_message": e.response['Error'].get('Message'),
                    "table_name": self.table_name,
                })
                raise DALError(
                    message=f"DynamoDB error: {error_code}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code=f"DYNAMODB_{error_code}",
                ) from e
            except BotoCoreError as e:
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB connection error during {operation}", extra={
                    "error": str(e),
                    "table_name": self.table_name,
                })
                raise ExternalServiceError(
                    message=f"Database connection error: {e}",
                    service_name="DynamoDB",
                    error_code="DATABASE_CONNECTION_ERROR",
                ) from e

            duration_ms = (time.time() - operation_start) * 1000
            metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=duration_ms)
            return result

        return wrapper

    return decorator


class DynamoDBHandler:
    """Thin DynamoDB table wrapper with error translation and observability."""

    def __init__(self, table_name: str, endpoint_url: Optional[str] = None):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            endpoint_url: DynamoDB endpoint URL (for local testing)
        """
        self.table_name = table_name
        resource_kwargs = {'endpoint_url': endpoint_url} if endpoint_url else {}
        self.dynamodb = boto3.resource('dynamodb', **resource_kwargs)
        self.table = self.dynamodb.Table(table_name)

    @tracer.capture_method
    @handle_dynamodb_errors("GetItem")
    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the item stored under ``key`` or None."""
        response = self.table.get_item(Key=key)
        return response.get('Item')

    @tracer.capture_method
    @handle_dynamodb_errors("PutItem")
    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Store ``item``, replacing any item with the same key."""
        self.table.put_item(Item=to_dynamodb_item(item))
        return item

    @tracer.capture_method
    @handle_dynamodb_errors("UpdateItem")
    def update_item(
        self,
        key: Dict[str, Any],
        update_expression: str,
        expression_attribute_values: Dict[str, Any],
        condition_expression: Optional[str] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        return_values: str = "UPDATED_NEW",
    ) -> Dict[str, Any]:
        """
        Update an item in place.

        Args:
            key: Primary key of the item to update
            update_expression: Update expression
            expression_attribute_values: Expression attribute values
            condition_expression: Conditional expression for the update
            expression_attribute_names: Expression attribute names
            return_values: What values to return after update

        Returns:
            The attributes selected by ``return_values``

        Raises:
            ConditionalCheckFailedError: If the condition is not met
        """
        update_kwargs = {
            'Key': key,
            'UpdateExpression': update_expression,
            'ExpressionAttributeValues': to_dynamodb_item(expression_attribute_values),
            'ReturnValues': return_values,
        }
        if condition_expression:
            update_kwargs['ConditionExpression'] = condition_expression
        if expression_attribute_names:
            update_kwargs['ExpressionAttributeNames'] = expression_attribute_names

        response = self.table.update_item(**update_kwargs)
        return response.get('Attributes', {})

    @tracer.capture_method
    @handle_dynamodb_errors("DeleteItem")
    def delete_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Delete the item under ``key`` and return it, or None if absent."""
        response = self.table.delete_item(Key=key, ReturnValues='ALL_OLD')
        return response.get('Attributes')

    @tracer.capture_method
    @handle_dynamodb_errors("Query")
    def query_items(self, key_condition: Any, index_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return every item matching ``key_condition``, following pagination."""
        query_kwargs: Dict[str, Any] = {'KeyConditionExpression': key_condition}
        if index_name:
            query_kwargs['IndexName'] = index_name

        items: List[Dict[str, Any]] = []
        while True:
            response = self.table.query(**query_kwargs)
            items.extend(response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                return items
            query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

    @tracer.capture_method
    @handle_dynamodb_errors("Scan")
    def scan_items(self) -> List[Dict[str, Any]]:
        """Return every item of the table, following pagination."""
        scan_kwargs: Dict[str, Any] = {}
        items: List[Dict[str, Any]] = []
        while True:
            response = self.table.scan(**scan_kwargs)
            items.extend(response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                return items
            scan_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']

    @tracer.capture_method
    @handle_dynamodb_errors("BatchGetItem")
    def batch_get_items(self, keys: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Batch get items by key.

        Keys are de-duplicated, requested in chunks of 100 and unprocessed
        keys are requested again until DynamoDB returns them all.
        """
        unique_keys = [json.loads(k) for k in dict.fromkeys(json.dumps(k, sort_keys=True) for k in keys)]
        items: List[Dict[str, Any]] = []

        for start in range(0, len(unique_keys), 100):
            request_items = {self.table_name: {'Keys': unique_keys[start:start + 100]}}
            while request_items:
                response = self.dynamodb.batch_get_item(RequestItems=request_items)
                items.extend(response.get('Responses', {}).get(self.table_name, []))
                request_items = response.get('UnprocessedKeys') or {}

        logger.debug("Batch get completed", extra={
            "table_name": self.table_name,
            "requested_keys": len(unique_keys),
            "retrieved_items": len(items),
        })
        return items
