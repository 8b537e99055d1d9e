# Database modules

from .catalog import catalog_db, MockCatalogService, DELIVERY_OPTIONS
from .storage import KeyValueStorage, InMemoryStorage, JsonFileStorage

__all__ = [
    "catalog_db",
    "MockCatalogService",
    "DELIVERY_OPTIONS",
    "KeyValueStorage",
    "InMemoryStorage",
    "JsonFileStorage",
]
