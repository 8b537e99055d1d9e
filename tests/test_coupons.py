from cart_engine.services.cart_store import CartStore
from cart_engine.services.coupons import check_coupon, coupon_shortfall, validate_and_apply

from helpers import make_item


def test_missing_coupon_is_rejected():
    result = check_coupon(None, 1000)

    assert not result.applied
    assert result.message == "Invalid coupon code"


def test_shortfall_rejection(percent_coupon):
    result = check_coupon(percent_coupon, 250)

    assert not result.applied
    assert result.shortfall == 50
    assert result.message == "Add items worth ₹50 more to apply this coupon"


def test_coupon_without_minimum_always_applies(fixed_coupon):
    assert coupon_shortfall(fixed_coupon, 0) == 0
    assert check_coupon(fixed_coupon, 10).applied


def test_rejection_does_not_mutate_store(percent_coupon):
    store = CartStore()
    store.add_item(make_item(price=250))
    revision = store.revision

    result = validate_and_apply(percent_coupon, store.state.summary.item_total, store)

    assert not result.applied
    assert store.revision == revision
    assert store.state.applied_coupon is None
    assert store.state.summary.discount == 0


def test_accepted_coupon_is_applied(percent_coupon):
    store = CartStore()
    store.add_item(make_item(price=600))

    result = validate_and_apply(percent_coupon, store.state.summary.item_total, store)

    assert result.applied
    assert store.state.applied_coupon == percent_coupon
    assert store.state.summary.discount == 40
