# Core modules

from .config import settings, get_settings, Settings
from .errors import (
    CartEngineError,
    CartItemNotFoundError,
    InvalidOptionError,
    ProductUnavailableError,
    EmptyCartError,
    AddressNotServiceableError,
    IntentSupersededError,
    CatalogError,
    ProductNotFoundError,
    StorageError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CartEngineError",
    "CartItemNotFoundError",
    "InvalidOptionError",
    "ProductUnavailableError",
    "EmptyCartError",
    "AddressNotServiceableError",
    "IntentSupersededError",
    "CatalogError",
    "ProductNotFoundError",
    "StorageError",
]
