"""
Cart Orchestration Controller

Sequences catalog lookups and persisted-state loading around cart store
mutations. Intents wait for the startup load, so a persisted snapshot can
never overwrite a user's changes.

Every logical operation (coupon, address, each product, the cart as a whole)
carries an intent counter. A lookup that resolves after a newer absolute
intent for the same operation was issued is discarded: the last intent wins,
not the last completion.
"""

import asyncio
import logging
import re
import uuid
from typing import Awaitable, Optional, TypeVar

from ..core.errors import (
    AddressNotServiceableError,
    CartItemNotFoundError,
    CatalogError,
    EmptyCartError,
    IntentSupersededError,
    InvalidOptionError,
    ProductUnavailableError,
    StorageError,
)
from ..database.catalog import DELIVERY_OPTIONS
from ..models.cart import (
    Address,
    AddressSelectionResult,
    CartItem,
    CartState,
    CartView,
    Coupon,
    CouponValidationResult,
    DeliveryOption,
    DeliveryType,
    OrderReceipt,
)
from ..models.product import Product
from .cart_store import CartStore
from .catalog_client import CatalogService
from .coupons import validate_and_apply
from .insights import InsightRules, build_insights
from .persistence import CartPersister

logger = logging.getLogger(__name__)

T = TypeVar("T")

COUPON_INTENT = "coupon"
ADDRESS_INTENT = "address"
CART_INTENT = "cart"

ADDRESS_REQUIRED_FIELDS = ("address_line1", "city", "state", "pincode", "phone")
PINCODE_PATTERN = re.compile(r"^\d{6}$")


def validate_address(address: Address) -> list[str]:
    """Return a list of problems with the address; empty when valid"""
    errors = [
        f"{field} is required"
        for field in ADDRESS_REQUIRED_FIELDS
        if not getattr(address, field).strip()
    ]
    if address.pincode.strip() and not PINCODE_PATTERN.match(address.pincode.strip()):
        errors.append("pincode must be 6 digits")
    return errors


def format_address(address: Address) -> str:
    parts = [
        address.address_line1,
        address.address_line2,
        address.city,
        address.state,
        address.pincode,
    ]
    return ", ".join(p for p in parts if p)


class CartController:
    """
    Orchestrates cart intents.

    Usage:
        controller = CartController(store, catalog, persister)
        await controller.initialize()

        await controller.add_item("prod-002", quantity=2)
        result = await controller.apply_coupon("SAVE10")
    """

    def __init__(
        self,
        store: CartStore,
        catalog: CatalogService,
        persister: Optional[CartPersister] = None,
        timeout: Optional[float] = None,
        insight_rules: Optional[InsightRules] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.persister = persister
        self.timeout = timeout
        self.insight_rules = insight_rules or InsightRules()
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._intents: dict[str, int] = {}

    # ==================== Startup ====================

    async def initialize(self) -> bool:
        """
        Load the persisted cart snapshot, once.

        Returns True if a snapshot was loaded into the store.
        """
        async with self._init_lock:
            if self._initialized:
                return False

            loaded = False
            try:
                if self.persister:
                    try:
                        snapshot = await self.persister.load()
                    except StorageError:
                        logger.exception("Failed to initialize cart - starting empty")
                        snapshot = None
                    if snapshot is not None:
                        loaded = self.store.load(snapshot)
            finally:
                # A failed load must not leave every later intent retrying it
                self._initialized = True
            return loaded

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def _ensure_ready(self) -> None:
        if not self._initialized:
            await self.initialize()

    # ==================== Intent tracking ====================

    def _begin(self, key: str) -> int:
        self._intents[key] = self._intents.get(key, 0) + 1
        return self._intents[key]

    def _current(self, key: str) -> int:
        return self._intents.get(key, 0)

    @staticmethod
    def _product_intent(product_id: str) -> str:
        return f"item:{product_id}"

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a catalog call, bounded by the configured timeout"""
        try:
            return await asyncio.wait_for(awaitable, self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Catalog call timed out after {self.timeout}s")
            raise CatalogError(f"Catalog call timed out after {self.timeout}s") from e

    # ==================== Items ====================

    @staticmethod
    def create_item(
        product: Product,
        option_id: Optional[str] = None,
        quantity: int = 1,
    ) -> CartItem:
        """Build a cart line; without an explicit option the first one is used"""
        if not product.in_stock:
            raise ProductUnavailableError(f"{product.name} is out of stock")

        if option_id is not None:
            option = product.get_option(option_id)
            if option is None:
                raise InvalidOptionError(f"Product {product.id} has no option {option_id}")
        else:
            option = product.options[0] if product.options else None

        suffix = uuid.uuid4().hex[:8]
        item_id = f"{product.id}-{option.id}-{suffix}" if option else f"{product.id}-{suffix}"
        return CartItem(
            id=item_id,
            product=product,
            quantity=quantity,
            selected_option=option,
        )

    async def add_item(
        self,
        product_id: str,
        option_id: Optional[str] = None,
        quantity: int = 1,
    ) -> CartState:
        """Look up a product and add it to the cart"""
        await self._ensure_ready()
        product_key = self._product_intent(product_id)
        marks = (self._current(product_key), self._current(CART_INTENT))

        product = await self._call(self.catalog.get_product(product_id))

        if marks != (self._current(product_key), self._current(CART_INTENT)):
            logger.info(f"Discarding add of {product_id}: superseded by a newer intent")
            raise IntentSupersededError(f"Add of {product_id} was superseded")

        return self.store.add_item(self.create_item(product, option_id, quantity))

    async def add_product(
        self,
        product: Product,
        option_id: Optional[str] = None,
        quantity: int = 1,
    ) -> CartState:
        """Add an already fetched product (e.g. a recommendation)"""
        await self._ensure_ready()
        return self.store.add_item(self.create_item(product, option_id, quantity))

    async def update_quantity(self, item_id: str, quantity: int) -> CartState:
        await self._ensure_ready()
        item = self.store.get_item(item_id)
        if item is None:
            raise CartItemNotFoundError(item_id)
        self._begin(self._product_intent(item.product_id))
        return self.store.update_quantity(item_id, quantity)

    async def remove_item(self, item_id: str) -> CartState:
        await self._ensure_ready()
        item = self.store.get_item(item_id)
        if item is None:
            raise CartItemNotFoundError(item_id)
        self._begin(self._product_intent(item.product_id))
        return self.store.remove_item(item_id)

    # ==================== Coupons ====================

    async def apply_coupon(self, code: str) -> CouponValidationResult:
        """Look up a coupon by code and apply it if the cart qualifies"""
        await self._ensure_ready()
        token = self._begin(COUPON_INTENT)

        coupon = await self._call(self.catalog.get_coupon(code.strip().upper()))

        if token != self._current(COUPON_INTENT):
            logger.info(f"Discarding coupon {code}: superseded by a newer coupon intent")
            return CouponValidationResult(
                applied=False,
                coupon=coupon,
                message="Superseded by a newer coupon request",
                superseded=True,
            )

        return validate_and_apply(coupon, self.store.state.summary.item_total, self.store)

    async def remove_coupon(self) -> CartState:
        await self._ensure_ready()
        self._begin(COUPON_INTENT)
        return self.store.remove_coupon()

    async def list_coupons(self) -> list[Coupon]:
        return await self._call(self.catalog.list_coupons())

    # ==================== Delivery ====================

    async def set_delivery_option(self, option: DeliveryOption) -> CartState:
        await self._ensure_ready()
        return self.store.set_delivery_option(option)

    async def set_delivery_type(self, delivery_type: DeliveryType) -> CartState:
        return await self.set_delivery_option(DELIVERY_OPTIONS[delivery_type])

    async def set_address(self, address: Address) -> AddressSelectionResult:
        """
        Validate an address, resolve serviceability and delivery time, then
        store all three in one commit.
        """
        await self._ensure_ready()

        errors = validate_address(address)
        if errors:
            logger.info(f"Rejected address {address.id}: {'; '.join(errors)}")
            return AddressSelectionResult(selected=False, errors=errors)

        token = self._begin(ADDRESS_INTENT)
        serviceable = await self._call(self.catalog.check_serviceability(address))
        delivery_time = await self._call(self.catalog.get_delivery_time(address))

        if token != self._current(ADDRESS_INTENT):
            logger.info(f"Discarding address {address.id}: superseded by a newer address intent")
            return AddressSelectionResult(
                selected=False,
                serviceable=serviceable,
                delivery_time=delivery_time,
                superseded=True,
            )

        self.store.select_address(
            address.model_copy(update={"is_serviceable": serviceable}),
            delivery_time,
        )
        logger.info(f"Delivering to {format_address(address)} (serviceable={serviceable})")
        return AddressSelectionResult(
            selected=True,
            serviceable=serviceable,
            delivery_time=delivery_time,
        )

    # ==================== Cart ====================

    async def clear_cart(self) -> CartState:
        await self._ensure_ready()
        self._begin(CART_INTENT)
        return self.store.clear()

    async def checkout(self) -> OrderReceipt:
        """Confirm the order and reset the cart"""
        await self._ensure_ready()
        state = self.store.state

        if state.is_empty:
            raise EmptyCartError("Cart is empty")

        address = state.selected_address
        if address is None:
            raise AddressNotServiceableError("Select a delivery address before checkout")
        if not address.is_serviceable:
            raise AddressNotServiceableError(f"We do not deliver to {format_address(address)} yet")

        receipt = OrderReceipt(
            order_id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            items=state.items,
            summary=state.summary,
            address=address,
            delivery_option=state.delivery_option,
            delivery_time=state.delivery_time,
        )

        self._begin(CART_INTENT)
        self.store.clear()

        logger.info(f"Order {receipt.order_id} placed: ₹{receipt.summary.total_payable}")
        return receipt

    def get_cart(self) -> CartState:
        return self.store.state

    def get_view(self) -> CartView:
        state = self.store.state
        return CartView(cart=state, insights=build_insights(state, self.insight_rules))

    async def recommended_products(self, limit: int = 4) -> list[Product]:
        """Catalog products not already in the cart"""
        in_cart = {item.product_id for item in self.store.state.items}
        products = await self._call(self.catalog.list_products())
        return [p for p in products if p.id not in in_cart][:limit]
