"""
Product catalog models.

The catalog keeps the camelCase attribute names of the public API both on
the wire and in the products table.
"""

from typing import Annotated, Optional
from uuid import uuid4

from pydantic import Field

from service.models.base import CamelModel


class ProductBase(CamelModel):
    """Fields shared by products and product requests."""

    product_name: Annotated[str, Field(
        min_length=1,
        description='Display name of the product',
        examples=['Notebook Pro 14']
    )]

    code: Annotated[str, Field(
        min_length=1,
        description='Product code, used as key of the product events',
        examples=['NBK-PRO-14']
    )]

    price: Annotated[float, Field(
        ge=0,
        description='Unit price of the product',
        examples=[1499.9]
    )] = 0.0

    model: Annotated[Optional[str], Field(
        description='Model of the product',
        examples=['2024']
    )] = None

    product_url: Annotated[Optional[str], Field(
        description='Public URL of the product page',
        examples=['https://shop.example.com/products/nbk-pro-14']
    )] = None


class CreateProductRequest(ProductBase):
    """Request model for creating a product."""


class UpdateProductRequest(ProductBase):
    """Request model for replacing the attributes of a product."""


class Product(ProductBase):
    """Product stored in the products table."""

    id: Annotated[str, Field(
        description='Unique identifier of the product',
        examples=['2f1c7d0e-8a55-4b1b-9d0b-6c0f5f7d2a11']
    )]

    @classmethod
    def create(cls, request: CreateProductRequest) -> 'Product':
        """Build a new product with a generated identifier."""
        return cls(id=str(uuid4()), **request.model_dump())
