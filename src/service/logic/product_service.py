"""
Business logic for the product catalog.

Every catalog change is reported to the product events function before the
response is returned, so the audit record exists once the client sees the
change.
"""

from typing import List, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.dal.dynamodb_handler import ConditionalCheckFailedError
from service.dal.products_db import ProductsDbHandler
from service.events.product_events_invoker import ProductEventsInvoker
from service.handlers.utils.errors import ErrorContext, ResourceNotFoundError
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.events import ProductEventType
from service.models.product import CreateProductRequest, Product, UpdateProductRequest


class ProductNotFoundError(ResourceNotFoundError):
    """Raised when no product has the requested id."""

    def __init__(self, product_id: str, context: Optional[ErrorContext] = None):
        super().__init__(
            resource_type="Product",
            resource_id=product_id,
            context=context,
        )


class ProductService:
    """Catalog operations over the products table."""

    def __init__(self, products_dal: ProductsDbHandler, events_invoker: ProductEventsInvoker):
        self.products_dal = products_dal
        self.events_invoker = events_invoker

    @tracer.capture_method
    def list_products(self) -> List[Product]:
        return self.products_dal.get_all_products()

    @tracer.capture_method
    def get_product(self, product_id: str) -> Product:
        product = self.products_dal.get_product_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    @tracer.capture_method
    def create_product(self, request: CreateProductRequest, lambda_request_id: str) -> Product:
        """
        Store a new product and emit ``PRODUCT_CREATED``.

        Args:
            request: Validated product attributes
            lambda_request_id: Request id recorded on the product event

        Returns:
            The stored product with its generated id
        """
        product = self.products_dal.create_product(Product.create(request))
        logger.info("Product created", extra={"product_id": product.id, "code": product.code})

        self.events_invoker.send_product_event(product, ProductEventType.CREATED, lambda_request_id)
        metrics.add_metric(name="ProductCreated", unit=MetricUnit.Count, value=1)
        return product

    @tracer.capture_method
    def update_product(self, product_id: str, request: UpdateProductRequest, lambda_request_id: str) -> Product:
        """
        Replace the attributes of a product and emit ``PRODUCT_UPDATED``.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        try:
            product = self.products_dal.update_product(product_id, request)
        except ConditionalCheckFailedError as e:
            raise ProductNotFoundError(product_id) from e

        logger.info("Product updated", extra={"product_id": product_id})
        self.events_invoker.send_product_event(product, ProductEventType.UPDATED, lambda_request_id)
        metrics.add_metric(name="ProductUpdated", unit=MetricUnit.Count, value=1)
        return product

    @tracer.capture_method
    def delete_product(self, product_id: str, lambda_request_id: str) -> Product:
        """
        Delete a product and emit ``PRODUCT_DELETED``.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        product = self.products_dal.delete_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        logger.info("Product deleted", extra={"product_id": product_id})
        self.events_invoker.send_product_event(product, ProductEventType.DELETED, lambda_request_id)
        metrics.add_metric(name="ProductDeleted", unit=MetricUnit.Count, value=1)
        return product
