# Cart services

from .pricing import PricingRules, DEFAULT_PRICING_RULES, compute_summary
from .merge import resolve_add, item_identity
from .coupons import check_coupon, validate_and_apply
from .cart_store import CartStore
from .persistence import CartPersister, CART_STORAGE_KEY
from .catalog_client import CatalogClient, CatalogService
from .cart_controller import CartController

__all__ = [
    "PricingRules",
    "DEFAULT_PRICING_RULES",
    "compute_summary",
    "resolve_add",
    "item_identity",
    "check_coupon",
    "validate_and_apply",
    "CartStore",
    "CartPersister",
    "CART_STORAGE_KEY",
    "CatalogClient",
    "CatalogService",
    "CartController",
]
