"""
Service Models Package

Pydantic models for the product catalog, orders and the product/order
events, shared by the handlers, the business logic and the data access
layer.
"""

from .events import (
    OrderEvent,
    OrderEventDdb,
    OrderEventResponse,
    OrderEventType,
    ProductEvent,
    ProductEventDdb,
    ProductEventType,
    SnsEnvelope,
)
from .order import (
    Billing,
    CarrierType,
    CreateOrderRequest,
    Order,
    OrderProduct,
    OrderResponse,
    PaymentType,
    Shipping,
    ShippingType,
)
from .product import CreateProductRequest, Product, UpdateProductRequest

__all__ = [
    # Catalog
    "Product",
    "CreateProductRequest",
    "UpdateProductRequest",

    # Orders
    "Order",
    "OrderProduct",
    "OrderResponse",
    "CreateOrderRequest",
    "Billing",
    "Shipping",
    "PaymentType",
    "ShippingType",
    "CarrierType",

    # Events
    "ProductEvent",
    "ProductEventDdb",
    "ProductEventType",
    "OrderEvent",
    "OrderEventDdb",
    "OrderEventResponse",
    "OrderEventType",
    "SnsEnvelope",
]
