"""
ECommerce REST API stack.

API Gateway validates request bodies and required query strings before the
functions are invoked; the functions validate again with pydantic.
"""
from typing import Any, Dict

from aws_cdk import (
    CfnOutput,
    Stack,
    aws_apigateway as apigateway,
    aws_lambda as lambda_,
    aws_logs as logs,
)
from constructs import Construct

PAYMENT_TYPES = ['CASH', 'DEBIT_CARD', 'CREDIT_CARD']
SHIPPING_TYPES = ['ECONOMIC', 'URGENT']
CARRIER_TYPES = ['CORREIOS', 'FEDEX']


class ECommerceApiStack(Stack):
    """REST API in front of the products, orders and order events functions."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        products_handler: lambda_.IFunction,
        orders_handler: lambda_.IFunction,
        order_events_fetch_handler: lambda_.IFunction,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        log_group = logs.LogGroup(self, 'ECommerceApiLogs')

        self.api = apigateway.RestApi(
            self, 'ecommerce-api',
            rest_api_name='ECommerce Service',
            description='This is the ECommerce service',
            cloud_watch_role=True,
            deploy_options=apigateway.StageOptions(
                access_log_destination=apigateway.LogGroupLogDestination(log_group),
                access_log_format=apigateway.AccessLogFormat.json_with_standard_fields(
                    caller=True,
                    http_method=True,
                    ip=True,
                    protocol=True,
                    request_time=True,
                    resource_path=True,
                    response_length=True,
                    status=True,
                    user=True,
                ),
            ),
        )

        self._add_products_resources(apigateway.LambdaIntegration(products_handler))
        self._add_orders_resources(
            apigateway.LambdaIntegration(orders_handler),
            apigateway.LambdaIntegration(order_events_fetch_handler),
        )

        self.url_output = CfnOutput(self, 'url', export_name='url', value=self.api.url)

    # =================================================================
    # Products
    # =================================================================

    def _add_products_resources(self, integration: apigateway.LambdaIntegration) -> None:
        products = self.api.root.add_resource('products')
        products.add_method('POST', integration, **self._product_body_validation(
            'ProductCreateRequestValidator', 'CreateProductModel', 'Product create request validator'))
        products.add_method('GET', integration)

        product_id = products.add_resource('{id}')
        product_id.add_method('GET', integration)
        product_id.add_method('PUT', integration, **self._product_body_validation(
            'ProductUpdateRequestValidator', 'UpdateProductModel', 'Product update request validator'))
        product_id.add_method('DELETE', integration)

    def _product_body_validation(self, validator_id: str, model_name: str, validator_name: str) -> Dict[str, Any]:
        validator = apigateway.RequestValidator(
            self, validator_id,
            rest_api=self.api,
            request_validator_name=validator_name,
            validate_request_body=True,
        )

        model = apigateway.Model(
            self, model_name,
            model_name=model_name,
            rest_api=self.api,
            content_type='application/json',
            schema=apigateway.JsonSchema(
                type=apigateway.JsonSchemaType.OBJECT,
                properties={
                    'productName': apigateway.JsonSchema(type=apigateway.JsonSchemaType.STRING),
                    'code': apigateway.JsonSchema(type=apigateway.JsonSchemaType.STRING),
                    'price': apigateway.JsonSchema(type=apigateway.JsonSchemaType.NUMBER),
                    'model': apigateway.JsonSchema(type=apigateway.JsonSchemaType.STRING),
                    'productUrl': apigateway.JsonSchema(type=apigateway.JsonSchemaType.STRING),
                },
                required=['productName', 'code'],
            ),
        )

        return {'request_validator': validator, 'request_models': {'application/json': model}}

    # =================================================================
    # Orders
    # =================================================================

    def _add_orders_resources(
        self,
        orders_integration: apigateway.LambdaIntegration,
        order_events_integration: apigateway.LambdaIntegration,
    ) -> None:
        orders = self.api.root.add_resource('orders')
        orders.add_method('POST', orders_integration, **self._create_order_validation())
        orders.add_method('GET', orders_integration)
        orders.add_method(
            'DELETE', orders_integration,
            request_parameters={
                'method.request.querystring.email': True,
                'method.request.querystring.orderId': True,
            },
            request_validator_options=apigateway.RequestValidatorOptions(
                request_validator_name='Email and OrderId parameters validator',
                validate_request_parameters=True,
            ),
        )

        order_events = orders.add_resource('events')
        order_events.add_method(
            'GET', order_events_integration,
            request_parameters={
                'method.request.querystring.email': True,
                'method.request.querystring.eventType': False,
            },
            request_validator_options=apigateway.RequestValidatorOptions(
                request_validator_name='Email parameter validator',
                validate_request_parameters=True,
            ),
        )

    def _create_order_validation(self) -> Dict[str, Any]:
        validator = apigateway.RequestValidator(
            self, 'OrderRequestValidator',
            rest_api=self.api,
            request_validator_name='Order request validator',
            validate_request_body=True,
        )

        model = apigateway.Model(
            self, 'OrderModel',
            model_name='OrderModel',
            rest_api=self.api,
            content_type='application/json',
            schema=apigateway.JsonSchema(
                type=apigateway.JsonSchemaType.OBJECT,
                properties={
                    'email': apigateway.JsonSchema(type=apigateway.JsonSchemaType.STRING),
                    'productIds': apigateway.JsonSchema(
                        type=apigateway.JsonSchemaType.ARRAY,
                        min_items=1,
                        items=apigateway.JsonSchema(type=apigateway.JsonSchemaType.STRING),
                    ),
                    'payment': apigateway.JsonSchema(
                        type=apigateway.JsonSchemaType.STRING,
                        enum=PAYMENT_TYPES,
                    ),
                    'shipping': apigateway.JsonSchema(
                        type=apigateway.JsonSchemaType.OBJECT,
                        properties={
                            'type': apigateway.JsonSchema(
                                type=apigateway.JsonSchemaType.STRING, enum=SHIPPING_TYPES),
                            'carrier': apigateway.JsonSchema(
                                type=apigateway.JsonSchemaType.STRING, enum=CARRIER_TYPES),
                        },
                        required=['type', 'carrier'],
                    ),
                },
                required=['email', 'productIds', 'payment', 'shipping'],
            ),
        )

        return {'request_validator': validator, 'request_models': {'application/json': model}}
