"""
Cart Engine Application

Shopping cart pricing and state service. Keeps one authoritative order
summary consistent with every cart mutation and persists cart snapshots.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import Settings, get_settings
from .database.catalog import MockCatalogService
from .database.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from .routes import cart_router, catalog_router
from .services.cart_controller import CartController
from .services.cart_store import CartStore
from .services.catalog_client import CatalogClient, CatalogService
from .services.insights import InsightRules
from .services.persistence import CartPersister
from .services.pricing import PricingRules

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> KeyValueStorage:
    if settings.storage_backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(settings.storage_dir)


def build_catalog(settings: Settings) -> CatalogService:
    if settings.remote_catalog_configured:
        return CatalogClient(settings.catalog_base_url, timeout=settings.catalog_timeout)
    return MockCatalogService(delay_scale=settings.mock_delay_scale)


def build_controller(settings: Settings) -> CartController:
    """Wire storage, store and catalog into a cart controller"""
    persister = CartPersister(build_storage(settings), key=settings.cart_storage_key)
    store = CartStore(rules=PricingRules.from_settings(settings), persister=persister)
    return CartController(
        store=store,
        catalog=build_catalog(settings),
        persister=persister,
        timeout=settings.catalog_timeout,
        insight_rules=InsightRules.from_settings(settings),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        logger.info("Cart Engine starting up...")
        logger.info(f"Storage backend: {settings.storage_backend}")
        logger.info(
            f"Catalog: {settings.catalog_base_url if settings.remote_catalog_configured else 'in-process mock'}"
        )

        controller = build_controller(settings)
        # Persisted cart must be in place before any request mutates it
        loaded = await controller.initialize()
        logger.info(f"Persisted cart {'restored' if loaded else 'not found'}")
        app.state.cart_controller = controller

        yield

        logger.info("Cart Engine shutting down...")
        if controller.persister:
            await controller.persister.flush()
        await controller.catalog.close()

    app = FastAPI(
        title=settings.app_name,
        description="Shopping cart pricing and state-consistency engine",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(cart_router)
    app.include_router(catalog_router)

    @app.get("/")
    async def home():
        return {
            "message": "Cart Engine API",
            "docs": "/docs",
            "endpoints": {
                "cart": "/api/cart",
                "catalog": "/api/catalog",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "cart-engine",
            "storage_backend": settings.storage_backend,
            "remote_catalog": settings.remote_catalog_configured,
        }

    return app


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "cart_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
