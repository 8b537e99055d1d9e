"""
Coupon Validator

Decides whether a coupon may be applied to the cart at all. The pricing
engine re-checks the minimum order value on every recomputation, but only
this module produces user-facing rejection messages.
"""

import logging
from typing import Optional

from ..models.cart import Coupon, CouponValidationResult

logger = logging.getLogger(__name__)

COUPON_NOT_FOUND_MESSAGE = "Invalid coupon code"


def format_amount(amount: float) -> str:
    """Render a currency amount without a trailing .0"""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


def coupon_shortfall(coupon: Coupon, item_total: float) -> float:
    """Amount still needed to reach the coupon's minimum order value"""
    if coupon.min_order_value is None:
        return 0
    return max(0, coupon.min_order_value - item_total)


def check_coupon(coupon: Optional[Coupon], item_total: float) -> CouponValidationResult:
    """Two-phase check: the coupon must exist, then the minimum order gate"""
    if coupon is None:
        return CouponValidationResult(applied=False, message=COUPON_NOT_FOUND_MESSAGE)

    shortfall = coupon_shortfall(coupon, item_total)
    if shortfall > 0:
        return CouponValidationResult(
            applied=False,
            coupon=coupon,
            shortfall=shortfall,
            message=f"Add items worth ₹{format_amount(shortfall)} more to apply this coupon",
        )

    return CouponValidationResult(
        applied=True,
        coupon=coupon,
        message=f"Coupon {coupon.code} applied",
    )


def validate_and_apply(coupon: Optional[Coupon], item_total: float, store) -> CouponValidationResult:
    """Apply the coupon to the store only if it passes validation"""
    result = check_coupon(coupon, item_total)
    if result.applied:
        store.apply_coupon(coupon)
    else:
        logger.info(f"Coupon rejected: {result.message}")
    return result
