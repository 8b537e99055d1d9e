"""Cart API routes"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Request

from ..core.errors import (
    AddressNotServiceableError,
    CartEngineError,
    CartItemNotFoundError,
    CatalogError,
    EmptyCartError,
    IntentSupersededError,
    InvalidOptionError,
    ProductNotFoundError,
    ProductUnavailableError,
)
from ..models.cart import (
    AddToCartRequest,
    Address,
    AddressResponse,
    ApplyCouponRequest,
    CartResponse,
    Coupon,
    CouponResponse,
    OrderReceipt,
    SetDeliveryOptionRequest,
    UpdateCartItemRequest,
)
from ..models.product import Product
from ..services.cart_controller import CartController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_cart_controller(request: Request) -> CartController:
    """Controller created by the application lifespan"""
    return request.app.state.cart_controller


def cart_response(controller: CartController, message: Optional[str] = None) -> CartResponse:
    view = controller.get_view()
    return CartResponse(cart=view.cart, insights=view.insights, message=message)


def raise_http_error(error: CartEngineError):
    """Translate cart engine errors into HTTP errors"""
    if isinstance(error, (CartItemNotFoundError, ProductNotFoundError)):
        raise HTTPException(status_code=404, detail=str(error))
    if isinstance(
        error,
        (InvalidOptionError, ProductUnavailableError, EmptyCartError, AddressNotServiceableError),
    ):
        raise HTTPException(status_code=400, detail=str(error))
    if isinstance(error, IntentSupersededError):
        raise HTTPException(status_code=409, detail=str(error))
    if isinstance(error, CatalogError):
        logger.error(f"Catalog failure: {error}")
        raise HTTPException(status_code=502, detail=str(error))
    raise error


@router.get("", response_model=CartResponse)
async def get_cart(controller: CartController = Depends(get_cart_controller)):
    """Get the current cart"""
    return cart_response(controller)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    controller: CartController = Depends(get_cart_controller),
):
    """Add an item to the cart"""
    try:
        await controller.add_item(request.product_id, request.option_id, request.quantity)
    except CartEngineError as e:
        raise_http_error(e)
    return cart_response(controller, f"Added {request.quantity}x {request.product_id} to cart")


@router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    controller: CartController = Depends(get_cart_controller),
):
    """Update item quantity in cart"""
    try:
        await controller.update_quantity(item_id, request.quantity)
    except CartEngineError as e:
        raise_http_error(e)
    return cart_response(controller, "Cart updated")


@router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    item_id: str,
    controller: CartController = Depends(get_cart_controller),
):
    """Remove an item from the cart"""
    try:
        await controller.remove_item(item_id)
    except CartEngineError as e:
        raise_http_error(e)
    return cart_response(controller, "Item removed")


@router.post("/coupon", response_model=CouponResponse)
async def apply_coupon(
    request: ApplyCouponRequest,
    controller: CartController = Depends(get_cart_controller),
):
    """
    Apply a coupon by code.

    A rejected coupon is a normal response with applied=false and a message
    for the user; only catalog failures are errors.
    """
    try:
        result = await controller.apply_coupon(request.code)
    except CartEngineError as e:
        raise_http_error(e)
    return CouponResponse(result=result, cart=controller.get_cart())


@router.delete("/coupon", response_model=CartResponse)
async def remove_coupon(controller: CartController = Depends(get_cart_controller)):
    """Remove the applied coupon"""
    await controller.remove_coupon()
    return cart_response(controller, "Coupon removed")


@router.get("/coupons", response_model=list[Coupon])
async def list_coupons(controller: CartController = Depends(get_cart_controller)):
    """List coupons available to the cart"""
    try:
        return await controller.list_coupons()
    except CartEngineError as e:
        raise_http_error(e)


@router.put("/delivery-option", response_model=CartResponse)
async def set_delivery_option(
    request: SetDeliveryOptionRequest,
    controller: CartController = Depends(get_cart_controller),
):
    """Choose standard or instant delivery"""
    await controller.set_delivery_type(request.type)
    return cart_response(controller, f"Delivery option set to {request.type.value}")


@router.put("/address", response_model=AddressResponse)
async def set_address(
    address: Address,
    controller: CartController = Depends(get_cart_controller),
):
    """Select the delivery address"""
    try:
        result = await controller.set_address(address)
    except CartEngineError as e:
        raise_http_error(e)
    return AddressResponse(result=result, cart=controller.get_cart())


@router.get("/recommendations", response_model=list[Product])
async def get_recommendations(
    request: Request,
    controller: CartController = Depends(get_cart_controller),
):
    """Products not yet in the cart"""
    limit = request.app.state.settings.max_recommended_products
    try:
        return await controller.recommended_products(limit)
    except CartEngineError as e:
        raise_http_error(e)


@router.post("/checkout", response_model=OrderReceipt)
async def checkout(controller: CartController = Depends(get_cart_controller)):
    """Place the order and reset the cart"""
    try:
        return await controller.checkout()
    except CartEngineError as e:
        raise_http_error(e)


@router.delete("", response_model=CartResponse)
async def clear_cart(controller: CartController = Depends(get_cart_controller)):
    """Clear all items from cart"""
    await controller.clear_cart()
    return cart_response(controller, "Cart cleared")
