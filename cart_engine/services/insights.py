"""Review-cart insights: savings, cashback and free-delivery progress"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.cart import CartInsights, CartItem, CartState, CashbackInfo, FreeDeliveryProgress
from .coupons import coupon_shortfall


@dataclass(frozen=True)
class InsightRules:
    free_delivery_threshold: float = 500
    cashback_threshold: float = 1000
    cashback_percentage: float = 5

    @classmethod
    def from_settings(cls, settings) -> "InsightRules":
        return cls(
            free_delivery_threshold=settings.free_delivery_threshold,
            cashback_threshold=settings.cashback_threshold,
            cashback_percentage=settings.cashback_percentage,
        )


def total_quantity(items: Sequence[CartItem]) -> int:
    return sum(item.quantity for item in items)


def calculate_item_savings(items: Sequence[CartItem]) -> float:
    """Savings against each product's original (MRP) price"""
    savings = 0
    for item in items:
        original_price = item.product.original_price or item.product.price
        savings += max(0, (original_price - item.unit_price) * item.quantity)
    return savings


def calculate_cashback(item_total: float, rules: InsightRules) -> CashbackInfo:
    needs_more = item_total < rules.cashback_threshold
    amount = 0 if needs_more else math.floor(item_total * rules.cashback_percentage / 100)
    return CashbackInfo(
        amount=amount,
        needs_more=needs_more,
        remaining=max(0, rules.cashback_threshold - item_total),
    )


def check_free_delivery(item_total: float, rules: InsightRules) -> FreeDeliveryProgress:
    return FreeDeliveryProgress(
        is_free=item_total >= rules.free_delivery_threshold,
        remaining=max(0, rules.free_delivery_threshold - item_total),
    )


def build_insights(state: CartState, rules: Optional[InsightRules] = None) -> CartInsights:
    rules = rules or InsightRules()
    item_total = state.summary.item_total
    item_savings = calculate_item_savings(state.items)

    shortfall = None
    if state.applied_coupon is not None and state.items:
        # Coupon stays applied but contributes nothing until the gap is closed
        shortfall = coupon_shortfall(state.applied_coupon, item_total) or None

    return CartInsights(
        total_quantity=total_quantity(state.items),
        item_savings=item_savings,
        total_savings=item_savings + state.summary.savings,
        cashback=calculate_cashback(item_total, rules),
        free_delivery=check_free_delivery(item_total, rules),
        coupon_shortfall=shortfall,
    )
