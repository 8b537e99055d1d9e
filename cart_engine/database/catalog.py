"""Mock catalog service: products, coupons, addresses and delivery lookups"""

import asyncio
from typing import Optional

from ..core.errors import ProductNotFoundError
from ..models.cart import Address, Coupon, DeliveryOption, DeliveryType, DiscountType
from ..models.product import Product, ProductOption

DEFAULT_DELIVERY_TIME = "30-60 mins"

DELIVERY_OPTIONS: dict[DeliveryType, DeliveryOption] = {
    DeliveryType.STANDARD: DeliveryOption(
        type=DeliveryType.STANDARD,
        label="Door delivery",
        fee=0,
    ),
    DeliveryType.INSTANT: DeliveryOption(
        type=DeliveryType.INSTANT,
        label="Instant delivery",
        fee=20,
        estimated_time="30-40 mins",
    ),
}

# Mock product catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Alphonso Mangoes",
        brand="FreshFarm",
        price=240,
        original_price=300,
        weight="1 kg",
        description="Hand-picked Ratnagiri Alphonso mangoes.",
        category="fruits",
        options=[
            ProductOption(id="opt-001-1kg", name="1 kg", price=240),
            ProductOption(id="opt-001-2kg", name="2 kg", price=450),
        ],
    ),
    "prod-002": Product(
        id="prod-002",
        name="Amul Taaza Toned Milk",
        brand="Amul",
        price=27,
        weight="500 ml",
        description="Pasteurised toned milk.",
        category="dairy",
    ),
    "prod-003": Product(
        id="prod-003",
        name="Basmati Rice",
        brand="India Gate",
        price=199,
        original_price=249,
        weight="1 kg",
        description="Aged long-grain basmati rice.",
        category="staples",
        options=[
            ProductOption(id="opt-003-1kg", name="1 kg", price=199),
            ProductOption(id="opt-003-5kg", name="5 kg", price=899),
        ],
    ),
    "prod-004": Product(
        id="prod-004",
        name="Cold Pressed Groundnut Oil",
        brand="Nature's Pride",
        price=320,
        original_price=360,
        weight="1 L",
        category="staples",
    ),
    "prod-005": Product(
        id="prod-005",
        name="Whole Wheat Bread",
        brand="Harvest Gold",
        price=50,
        weight="400 g",
        category="bakery",
    ),
    "prod-006": Product(
        id="prod-006",
        name="Greek Yogurt",
        brand="Epigamia",
        price=90,
        original_price=100,
        weight="200 g",
        category="dairy",
        in_stock=False,
    ),
}

COUPONS: dict[str, Coupon] = {
    "SAVE10": Coupon(
        id="cpn-001",
        code="SAVE10",
        discount=10,
        discount_type=DiscountType.PERCENTAGE,
        min_order_value=300,
        max_discount=40,
        description="10% off up to ₹40 on orders above ₹300",
    ),
    "FLAT50": Coupon(
        id="cpn-002",
        code="FLAT50",
        discount=50,
        discount_type=DiscountType.FIXED,
        min_order_value=500,
        description="Flat ₹50 off on orders above ₹500",
    ),
    "WELCOME20": Coupon(
        id="cpn-003",
        code="WELCOME20",
        discount=20,
        discount_type=DiscountType.PERCENTAGE,
        max_discount=100,
        description="20% off up to ₹100 on your first order",
    ),
}

ADDRESSES: list[Address] = [
    Address(
        id="addr-001",
        name="Home",
        address_line1="12, Palm Grove Apartments",
        address_line2="Indiranagar 2nd Stage",
        city="Bengaluru",
        state="Karnataka",
        pincode="560038",
        phone="+91 9876543210",
        is_default=True,
    ),
    Address(
        id="addr-002",
        name="Office",
        address_line1="4th Floor, Tower B, Tech Park",
        city="Pune",
        state="Maharashtra",
        pincode="411014",
        phone="+91 9876543210",
    ),
    Address(
        id="addr-003",
        name="Parents",
        address_line1="22, Lake View Road",
        city="Shillong",
        state="Meghalaya",
        pincode="793001",
        phone="+91 9123456780",
        is_serviceable=False,
    ),
]


class MockCatalogService:
    """
    In-process catalog collaborator with simulated network latency.

    delay_scale multiplies every simulated delay; 0 disables them.
    """

    def __init__(
        self,
        delay_scale: float = 1.0,
        products: Optional[dict[str, Product]] = None,
        coupons: Optional[dict[str, Coupon]] = None,
        addresses: Optional[list[Address]] = None,
    ):
        self.delay_scale = delay_scale
        self.products = products if products is not None else dict(PRODUCTS)
        self.coupons = coupons if coupons is not None else dict(COUPONS)
        self.addresses = addresses if addresses is not None else list(ADDRESSES)

    async def _delay(self, ms: int) -> None:
        if self.delay_scale > 0:
            await asyncio.sleep(ms * self.delay_scale / 1000)

    async def get_product(self, product_id: str) -> Product:
        await self._delay(300)
        product = self.products.get(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    async def list_products(self) -> list[Product]:
        await self._delay(300)
        return list(self.products.values())

    async def get_coupon(self, code: str) -> Optional[Coupon]:
        await self._delay(200)
        return self.coupons.get(code)

    async def list_coupons(self) -> list[Coupon]:
        await self._delay(200)
        return list(self.coupons.values())

    async def list_addresses(self) -> list[Address]:
        await self._delay(200)
        return list(self.addresses)

    async def check_serviceability(self, address: Address) -> bool:
        await self._delay(300)
        return address.is_serviceable

    async def get_delivery_time(self, address: Address) -> str:
        await self._delay(200)
        return DEFAULT_DELIVERY_TIME

    async def close(self) -> None:
        pass


# Singleton instance served by the catalog API routes
catalog_db = MockCatalogService(delay_scale=0)
