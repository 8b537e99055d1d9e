# Cart Engine Models

from .product import Product, ProductOption
from .cart import (
    Address,
    AddressSelectionResult,
    CartInsights,
    CartItem,
    CartState,
    CartView,
    CashbackInfo,
    Coupon,
    CouponValidationResult,
    DeliveryOption,
    DeliveryType,
    DiscountType,
    FreeDeliveryProgress,
    OrderReceipt,
    OrderSummary,
)

__all__ = [
    "Product",
    "ProductOption",
    "Address",
    "AddressSelectionResult",
    "CartInsights",
    "CartItem",
    "CartState",
    "CartView",
    "CashbackInfo",
    "Coupon",
    "CouponValidationResult",
    "DeliveryOption",
    "DeliveryType",
    "DiscountType",
    "FreeDeliveryProgress",
    "OrderReceipt",
    "OrderSummary",
]
