"""Cart Engine exceptions"""


class CartEngineError(Exception):
    """Base exception for cart engine errors"""
    pass


class CartItemNotFoundError(CartEngineError):
    """No cart line with the given id"""

    def __init__(self, item_id: str):
        super().__init__(f"Item not in cart: {item_id}")
        self.item_id = item_id


class InvalidOptionError(CartEngineError):
    """Requested product option does not exist"""
    pass


class EmptyCartError(CartEngineError):
    """Operation requires a non-empty cart"""
    pass


class AddressNotServiceableError(CartEngineError):
    """Checkout attempted without a serviceable delivery address"""
    pass


class IntentSupersededError(CartEngineError):
    """A newer intent for the same operation was issued while this one was pending"""
    pass


class CatalogError(CartEngineError):
    """Catalog collaborator lookup failed"""
    pass


class ProductNotFoundError(CatalogError):
    """Catalog has no product with the given id"""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class StorageError(CartEngineError):
    """Persistence adapter failure"""
    pass


class ProductUnavailableError(CartEngineError):
    """Product is out of stock and cannot be added"""
    pass
