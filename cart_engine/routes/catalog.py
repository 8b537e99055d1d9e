"""Catalog API routes: the remote collaborator consumed by CatalogClient"""

from fastapi import APIRouter, HTTPException

from ..core.errors import ProductNotFoundError
from ..database.catalog import catalog_db
from ..models.cart import Address, Coupon, DeliveryTimeResponse, ServiceabilityResponse
from ..models.product import Product

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])


@router.get("/products", response_model=list[Product])
async def list_products():
    """List all products"""
    return await catalog_db.list_products()


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get a product by ID"""
    try:
        return await catalog_db.get_product(product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")


@router.get("/coupons", response_model=list[Coupon])
async def list_coupons():
    """List available coupons"""
    return await catalog_db.list_coupons()


@router.get("/coupons/{code}", response_model=Coupon)
async def get_coupon(code: str):
    """Look up a coupon by code"""
    coupon = await catalog_db.get_coupon(code)
    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return coupon


@router.get("/addresses", response_model=list[Address])
async def list_addresses():
    """List saved addresses"""
    return await catalog_db.list_addresses()


@router.post("/serviceability", response_model=ServiceabilityResponse)
async def check_serviceability(address: Address):
    """Whether deliveries can be made to the address"""
    return ServiceabilityResponse(serviceable=await catalog_db.check_serviceability(address))


@router.post("/delivery-time", response_model=DeliveryTimeResponse)
async def get_delivery_time(address: Address):
    """Estimated delivery time for the address"""
    return DeliveryTimeResponse(delivery_time=await catalog_db.get_delivery_time(address))
