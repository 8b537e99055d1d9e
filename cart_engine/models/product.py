"""Product models for the cart engine"""

from pydantic import BaseModel, Field
from typing import Optional


class ProductOption(BaseModel):
    """Purchasable variant of a product (pack size, weight, ...)"""
    id: str
    name: str
    price: float = Field(ge=0)


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    name: str
    price: float = Field(ge=0)
    brand: Optional[str] = None
    original_price: Optional[float] = None
    image: Optional[str] = None
    weight: Optional[str] = None
    description: Optional[str] = None
    options: list[ProductOption] = []
    in_stock: bool = True
    category: Optional[str] = None

    def get_option(self, option_id: str) -> Optional[ProductOption]:
        """Find an option by ID"""
        return next((o for o in self.options if o.id == option_id), None)
