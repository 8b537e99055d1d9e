"""
Catalog API Client

HTTP client for the remote catalog collaborator: product, coupon,
serviceability and delivery-time lookups.
"""

import logging
from typing import Any, Optional, Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from ..core.errors import CatalogError, ProductNotFoundError
from ..models.cart import Address, Coupon, DeliveryTimeResponse, ServiceabilityResponse
from ..models.product import Product

logger = logging.getLogger(__name__)


class CatalogService(Protocol):
    """Lookups the cart controller depends on"""

    async def get_product(self, product_id: str) -> Product: ...

    async def list_products(self) -> list[Product]: ...

    async def get_coupon(self, code: str) -> Optional[Coupon]: ...

    async def list_coupons(self) -> list[Coupon]: ...

    async def list_addresses(self) -> list[Address]: ...

    async def check_serviceability(self, address: Address) -> bool: ...

    async def get_delivery_time(self, address: Address) -> str: ...

    async def close(self) -> None: ...


class CatalogClient:
    """
    Client for the catalog API.

    Transport failures and unexpected status codes surface as CatalogError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize catalog client.

        Args:
            base_url: Base URL of the catalog API
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
    ) -> httpx.Response:
        try:
            response = await self._http_client.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Catalog request {method} {path} failed: {e}")
            raise CatalogError(f"Catalog unavailable: {e}") from e
        return response

    def _parse(self, response: httpx.Response, schema: Any) -> Any:
        """Validate a response body against schema; bad payloads are CatalogErrors"""
        if response.status_code >= 400:
            logger.error(f"Catalog request failed: {response.status_code} - {response.text}")
            raise CatalogError(f"Catalog request failed with status {response.status_code}")
        try:
            return TypeAdapter(schema).validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed catalog response from {response.request.url}: {e}")
            raise CatalogError(f"Malformed catalog response from {response.request.url.path}") from e

    # ==================== Product APIs ====================

    async def get_product(self, product_id: str) -> Product:
        response = await self._request("GET", f"/api/catalog/products/{product_id}")
        if response.status_code == 404:
            raise ProductNotFoundError(product_id)
        return self._parse(response, Product)

    async def list_products(self) -> list[Product]:
        response = await self._request("GET", "/api/catalog/products")
        return self._parse(response, list[Product])

    # ==================== Coupon APIs ====================

    async def get_coupon(self, code: str) -> Optional[Coupon]:
        """Look up a coupon; None when the code does not exist"""
        response = await self._request("GET", f"/api/catalog/coupons/{code}")
        if response.status_code == 404:
            return None
        return self._parse(response, Coupon)

    async def list_coupons(self) -> list[Coupon]:
        response = await self._request("GET", "/api/catalog/coupons")
        return self._parse(response, list[Coupon])

    # ==================== Location APIs ====================

    async def list_addresses(self) -> list[Address]:
        response = await self._request("GET", "/api/catalog/addresses")
        return self._parse(response, list[Address])

    async def check_serviceability(self, address: Address) -> bool:
        response = await self._request(
            "POST",
            "/api/catalog/serviceability",
            body=address.model_dump(mode="json"),
        )
        return self._parse(response, ServiceabilityResponse).serviceable

    async def get_delivery_time(self, address: Address) -> str:
        response = await self._request(
            "POST",
            "/api/catalog/delivery-time",
            body=address.model_dump(mode="json"),
        )
        return self._parse(response, DeliveryTimeResponse).delivery_time
