"""
DynamoDB access to the products table.
"""

from typing import List, Optional

from service.dal.dynamodb_handler import DynamoDBHandler
from service.handlers.utils.observability import logger, tracer
from service.models.product import Product, UpdateProductRequest


class ProductsDbHandler(DynamoDBHandler):
    """Products table keyed by ``id``."""

    @tracer.capture_method
    def get_all_products(self) -> List[Product]:
        items = self.scan_items()
        logger.debug(f'Retrieved {len(items)} products')
        return [Product.model_validate(item) for item in items]

    @tracer.capture_method
    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        item = self.get_item({'id': product_id})
        return Product.model_validate(item) if item else None

    @tracer.capture_method
    def get_products_by_ids(self, product_ids: List[str]) -> List[Product]:
        """Return the stored products among ``product_ids``; unknown ids are skipped."""
        items = self.batch_get_items([{'id': product_id} for product_id in product_ids])
        return [Product.model_validate(item) for item in items]

    @tracer.capture_method
    def create_product(self, product: Product) -> Product:
        self.put_item(product.to_dict())
        tracer.put_annotation('product_created', product.id)
        return product

    @tracer.capture_method
    def update_product(self, product_id: str, request: UpdateProductRequest) -> Product:
        """
        Replace the attributes of an existing product.

        Raises:
            ConditionalCheckFailedError: If no product has this id
        """
        attributes = self.update_item(
            key={'id': product_id},
            update_expression='SET #n = :n, #c = :c, #p = :p, #m = :m, #u = :u',
            expression_attribute_names={
                '#n': 'productName',
                '#c': 'code',
                '#p': 'price',
                '#m': 'model',
                '#u': 'productUrl',
            },
            expression_attribute_values={
                ':n': request.product_name,
                ':c': request.code,
                ':p': request.price,
                ':m': request.model,
                ':u': request.product_url,
            },
            condition_expression='attribute_exists(id)',
        )
        return Product.model_validate({**attributes, 'id': product_id})

    @tracer.capture_method
    def delete_product(self, product_id: str) -> Optional[Product]:
        item = self.delete_item({'id': product_id})
        return Product.model_validate(item) if item else None
