"""
Pricing Engine

Pure functions mapping cart lines, coupon and delivery option to an
OrderSummary. No side effects; the same inputs always give the same summary.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.cart import CartItem, Coupon, DeliveryOption, DiscountType, OrderSummary


@dataclass(frozen=True)
class PricingRules:
    """Order-level pricing constants"""
    free_delivery_threshold: float = 500
    default_delivery_fee: float = 50
    platform_fee: float = 10

    @classmethod
    def from_settings(cls, settings) -> "PricingRules":
        return cls(
            free_delivery_threshold=settings.free_delivery_threshold,
            default_delivery_fee=settings.default_delivery_fee,
            platform_fee=settings.platform_fee,
        )


DEFAULT_PRICING_RULES = PricingRules()


def calculate_item_total(items: Sequence[CartItem]) -> float:
    return sum(item.total_price for item in items)


def calculate_delivery_fee(
    item_total: float,
    delivery_option: Optional[DeliveryOption] = None,
    rules: PricingRules = DEFAULT_PRICING_RULES,
) -> float:
    """Delivery is free at or above the threshold"""
    if item_total >= rules.free_delivery_threshold:
        return 0
    if delivery_option is None:
        return rules.default_delivery_fee
    return delivery_option.fee


def is_coupon_applicable(coupon: Coupon, item_total: float) -> bool:
    if coupon.min_order_value is None:
        return True
    return item_total >= coupon.min_order_value


def calculate_discount(item_total: float, coupon: Optional[Coupon] = None) -> float:
    """
    Discount granted by a coupon.

    An inapplicable coupon yields zero rather than an error. Percentage
    discounts are not rounded.
    """
    if coupon is None or not is_coupon_applicable(coupon, item_total):
        return 0

    if coupon.discount_type == DiscountType.PERCENTAGE:
        max_discount = coupon.max_discount if coupon.max_discount is not None else math.inf
        return min(item_total * coupon.discount / 100, max_discount)

    return coupon.discount


def compute_summary(
    items: Sequence[CartItem],
    coupon: Optional[Coupon] = None,
    delivery_option: Optional[DeliveryOption] = None,
    rules: PricingRules = DEFAULT_PRICING_RULES,
) -> OrderSummary:
    """Compute the order summary for a cart"""
    item_total = calculate_item_total(items)
    delivery_fee = calculate_delivery_fee(item_total, delivery_option, rules)
    discount = calculate_discount(item_total, coupon)
    total_payable = item_total + delivery_fee - discount + rules.platform_fee

    return OrderSummary(
        item_total=item_total,
        delivery_fee=delivery_fee,
        discount=discount,
        platform_fee=rules.platform_fee,
        total_payable=total_payable,
        savings=discount,
    )
