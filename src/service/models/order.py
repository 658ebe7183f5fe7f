"""
Order domain models.

Orders are stored with the customer email as partition key and a generated
identifier as sort key, embedding the ordered products and the billing and
shipping details.
"""

import re
import time
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional
from uuid import uuid4

from pydantic import Field, field_validator

from service.models.base import CamelModel
from service.models.product import Product


class PaymentType(str, Enum):
    """Accepted payment methods."""

    CASH = 'CASH'
    DEBIT_CARD = 'DEBIT_CARD'
    CREDIT_CARD = 'CREDIT_CARD'


class ShippingType(str, Enum):
    """Shipping speed."""

    ECONOMIC = 'ECONOMIC'
    URGENT = 'URGENT'


class CarrierType(str, Enum):
    """Shipping carriers."""

    CORREIOS = 'CORREIOS'
    FEDEX = 'FEDEX'


class OrderProduct(CamelModel):
    """Product line embedded in an order."""

    code: str
    price: float


class Billing(CamelModel):
    """Billing information of an order."""

    payment: PaymentType
    total_price: Annotated[float, Field(ge=0, examples=[2999.8])]


class Shipping(CamelModel):
    """Shipping information of an order."""

    type: ShippingType
    carrier: CarrierType


class CreateOrderRequest(CamelModel):
    """Request model for placing an order."""

    email: Annotated[str, Field(
        description='Customer email address',
        examples=['john.doe@example.com']
    )]

    product_ids: Annotated[List[str], Field(
        min_length=1,
        description='Identifiers of the ordered products',
        examples=[['2f1c7d0e-8a55-4b1b-9d0b-6c0f5f7d2a11']]
    )]

    payment: Annotated[PaymentType, Field(description='Payment method')]

    shipping: Annotated[Shipping, Field(description='Shipping type and carrier')]

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate email format. The address is stored as given."""
        if not re.match(r'^[^@\s]+@[^@\s]+$', v):
            raise ValueError('Invalid email format')
        return v


class Order(CamelModel):
    """Order record of the orders table."""

    pk: Annotated[str, Field(description='Customer email')]
    sk: Annotated[str, Field(description='Order identifier')]
    created_at: Annotated[int, Field(description='Creation time in epoch milliseconds')]
    billing: Billing
    shipping: Shipping
    products: List[OrderProduct] = []

    @classmethod
    def create(cls, request: CreateOrderRequest, products: List[Product]) -> 'Order':
        """
        Build a new order for the requested products.

        Args:
            request: Validated order request
            products: Products resolved for ``request.product_ids``

        Returns:
            Order with a generated identifier and the summed total price
        """
        by_id = {product.id: product for product in products}
        order_products = [
            OrderProduct(code=by_id[product_id].code, price=by_id[product_id].price)
            for product_id in request.product_ids
        ]
        total_price = round(sum(product.price for product in order_products), 2)

        return cls(
            pk=request.email,
            sk=str(uuid4()),
            created_at=int(time.time() * 1000),
            billing=Billing(payment=request.payment, total_price=total_price),
            shipping=request.shipping,
            products=order_products,
        )

    @property
    def email(self) -> str:
        return self.pk

    @property
    def order_id(self) -> str:
        return self.sk

    def product_codes(self) -> List[str]:
        return [product.code for product in self.products]


class OrderResponse(CamelModel):
    """Order as returned by the API."""

    email: str
    id: str
    created_at: int
    billing: Billing
    shipping: Shipping
    products: Optional[List[OrderProduct]] = None

    @classmethod
    def from_order(cls, order: Order) -> 'OrderResponse':
        return cls(
            email=order.email,
            id=order.order_id,
            created_at=order.created_at,
            billing=order.billing,
            shipping=order.shipping,
            products=order.products or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json', exclude_none=True)
