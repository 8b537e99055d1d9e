import pytest

from cart_engine.database.catalog import MockCatalogService
from cart_engine.database.storage import InMemoryStorage
from cart_engine.models.cart import Coupon, DiscountType
from cart_engine.models.product import ProductOption
from cart_engine.services.cart_controller import CartController
from cart_engine.services.cart_store import CartStore
from cart_engine.services.persistence import CartPersister


@pytest.fixture
def option_small():
    return ProductOption(id="small", name="Small", price=40)


@pytest.fixture
def percent_coupon():
    return Coupon(
        code="SAVE10",
        discount=10,
        discount_type=DiscountType.PERCENTAGE,
        min_order_value=300,
        max_discount=40,
    )


@pytest.fixture
def fixed_coupon():
    return Coupon(code="FLAT50", discount=50, discount_type=DiscountType.FIXED)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def persister(storage):
    return CartPersister(storage)


@pytest.fixture
def store(persister):
    return CartStore(persister=persister)


@pytest.fixture
def catalog():
    return MockCatalogService(delay_scale=0)


@pytest.fixture
def controller(store, catalog, persister):
    return CartController(store, catalog, persister)
