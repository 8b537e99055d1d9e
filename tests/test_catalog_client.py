import httpx
import pytest

from cart_engine.core.errors import CatalogError, ProductNotFoundError
from cart_engine.database.catalog import ADDRESSES, COUPONS, PRODUCTS
from cart_engine.services.catalog_client import CatalogClient


def handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/api/catalog/products/prod-002":
        return httpx.Response(200, json=PRODUCTS["prod-002"].model_dump(mode="json"))
    if path == "/api/catalog/coupons/SAVE10":
        return httpx.Response(200, json=COUPONS["SAVE10"].model_dump(mode="json"))
    if path == "/api/catalog/serviceability":
        return httpx.Response(200, json={"serviceable": False})
    if path == "/api/catalog/delivery-time":
        return httpx.Response(200, json={"delivery_time": "10 mins"})
    if path == "/api/catalog/products/broken":
        return httpx.Response(200, json={"id": "broken"})
    if path == "/api/catalog/coupons/GARBLED":
        return httpx.Response(200, text="<html>gateway</html>")
    if path == "/api/catalog/addresses":
        return httpx.Response(500, text="boom")
    return httpx.Response(404, json={"detail": "Not found"})


@pytest.fixture
async def client():
    client = CatalogClient("http://catalog.test/", transport=httpx.MockTransport(handler))
    yield client
    await client.close()


async def test_get_product(client):
    product = await client.get_product("prod-002")

    assert product == PRODUCTS["prod-002"]


async def test_missing_product_raises(client):
    with pytest.raises(ProductNotFoundError):
        await client.get_product("nope")


async def test_get_coupon(client):
    assert (await client.get_coupon("SAVE10")).max_discount == 40
    assert await client.get_coupon("BOGUS") is None


async def test_location_lookups(client):
    address = ADDRESSES[0]

    assert await client.check_serviceability(address) is False
    assert await client.get_delivery_time(address) == "10 mins"


async def test_server_error_raises_catalog_error(client):
    with pytest.raises(CatalogError):
        await client.list_addresses()


async def test_transport_error_raises_catalog_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = CatalogClient("http://catalog.test", transport=httpx.MockTransport(unreachable))
    with pytest.raises(CatalogError):
        await client.get_coupon("SAVE10")
    await client.close()


async def test_invalid_product_payload_raises_catalog_error(client):
    with pytest.raises(CatalogError):
        await client.get_product("broken")


async def test_non_json_body_raises_catalog_error(client):
    with pytest.raises(CatalogError):
        await client.get_coupon("GARBLED")


async def test_missing_response_field_raises_catalog_error():
    def empty_body(request):
        return httpx.Response(200, json={})

    client = CatalogClient("http://catalog.test", transport=httpx.MockTransport(empty_body))
    with pytest.raises(CatalogError):
        await client.check_serviceability(ADDRESSES[0])
    with pytest.raises(CatalogError):
        await client.get_delivery_time(ADDRESSES[0])
    await client.close()
