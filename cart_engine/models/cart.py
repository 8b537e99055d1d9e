"""Cart models for the cart engine"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional
from enum import Enum

from .product import Product, ProductOption


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class DeliveryType(str, Enum):
    STANDARD = "standard"
    INSTANT = "instant"


class Coupon(BaseModel):
    """Discount coupon, immutable once fetched"""
    model_config = ConfigDict(frozen=True)

    code: str
    discount: float = Field(ge=0)
    discount_type: DiscountType
    min_order_value: Optional[float] = None
    max_discount: Optional[float] = None  # percentage coupons only
    description: Optional[str] = None
    id: Optional[str] = None


class DeliveryOption(BaseModel):
    """Delivery method selected for the cart"""
    type: DeliveryType
    label: str
    fee: float = Field(ge=0)
    estimated_time: Optional[str] = None


class Address(BaseModel):
    """Delivery address"""
    id: str
    address_line1: str
    city: str
    state: str
    pincode: str
    phone: str
    name: Optional[str] = None
    address_line2: Optional[str] = None
    is_default: bool = False
    is_serviceable: bool = True


class CartItem(BaseModel):
    """Line in a shopping cart"""
    id: str
    product: Product
    quantity: int = Field(ge=1)
    selected_option: Optional[ProductOption] = None

    @computed_field
    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def unit_price(self) -> float:
        if self.selected_option is not None:
            return self.selected_option.price
        return self.product.price

    @computed_field
    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price

    @property
    def identity(self) -> tuple[str, Optional[str]]:
        """(product_id, option_id) pair deciding merge-on-add"""
        option_id = self.selected_option.id if self.selected_option else None
        return (self.product.id, option_id)


class OrderSummary(BaseModel):
    """Derived pricing of a cart; only the pricing engine produces these"""
    item_total: float = 0
    delivery_fee: float = 0
    discount: float = 0
    platform_fee: float = 0
    total_payable: float = 0
    savings: float = 0


class CartState(BaseModel):
    """Full cart state, owned by the cart store"""
    items: list[CartItem] = []
    applied_coupon: Optional[Coupon] = None
    delivery_option: Optional[DeliveryOption] = None
    selected_address: Optional[Address] = None
    delivery_time: Optional[str] = None
    summary: OrderSummary = Field(default_factory=OrderSummary)

    @property
    def is_empty(self) -> bool:
        return not self.items


# ==================== API payloads ====================


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    option_id: Optional[str] = None
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity; zero removes the line"""
    quantity: int = Field(ge=0)


class ApplyCouponRequest(BaseModel):
    """Request to apply a coupon by code"""
    code: str = Field(min_length=1)


class SetDeliveryOptionRequest(BaseModel):
    """Request to choose a delivery option"""
    type: DeliveryType


class CashbackInfo(BaseModel):
    amount: float
    needs_more: bool
    remaining: float


class FreeDeliveryProgress(BaseModel):
    is_free: bool
    remaining: float


class CartInsights(BaseModel):
    """Review-cart figures derived from the current state"""
    total_quantity: int
    item_savings: float
    total_savings: float
    cashback: CashbackInfo
    free_delivery: FreeDeliveryProgress
    coupon_shortfall: Optional[float] = None


class CartView(BaseModel):
    """Cart state together with its insights"""
    cart: CartState
    insights: CartInsights


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartState
    insights: Optional[CartInsights] = None
    message: Optional[str] = None


class CouponValidationResult(BaseModel):
    """Outcome of a coupon application attempt"""
    applied: bool
    coupon: Optional[Coupon] = None
    shortfall: Optional[float] = None
    message: Optional[str] = None
    superseded: bool = False


class CouponResponse(BaseModel):
    result: CouponValidationResult
    cart: CartState


class AddressSelectionResult(BaseModel):
    """Outcome of an address selection attempt"""
    selected: bool
    serviceable: Optional[bool] = None
    delivery_time: Optional[str] = None
    errors: list[str] = []
    superseded: bool = False


class AddressResponse(BaseModel):
    result: AddressSelectionResult
    cart: CartState


class ServiceabilityResponse(BaseModel):
    serviceable: bool


class DeliveryTimeResponse(BaseModel):
    delivery_time: str


class OrderReceipt(BaseModel):
    """Confirmation of a completed checkout"""
    order_id: str
    items: list[CartItem]
    summary: OrderSummary
    address: Address
    delivery_option: Optional[DeliveryOption] = None
    delivery_time: Optional[str] = None
