"""Cart Engine Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Cart Engine"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8002

    # Pricing
    free_delivery_threshold: float = 500
    default_delivery_fee: float = 50
    platform_fee: float = 10

    # Review cart insights
    cashback_threshold: float = 1000
    cashback_percentage: float = 5
    max_recommended_products: int = 4

    # Persistence
    storage_backend: str = "file"  # "file" or "memory"
    storage_dir: str = ".cart_storage"
    cart_storage_key: str = "cart"

    # Catalog collaborator (unset = in-process mock catalog)
    catalog_base_url: Optional[str] = None
    catalog_timeout: float = 10.0
    mock_delay_scale: float = 1.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def remote_catalog_configured(self) -> bool:
        """Check if a remote catalog service is configured"""
        return bool(self.catalog_base_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
