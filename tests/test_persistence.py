import asyncio

import pytest

from cart_engine.core.errors import StorageError
from cart_engine.database.storage import InMemoryStorage, JsonFileStorage
from cart_engine.models.cart import CartState
from cart_engine.services.cart_store import CartStore
from cart_engine.services.persistence import CartPersister

from helpers import make_item


class FailingStorage(InMemoryStorage):
    async def save(self, key, value):
        raise StorageError(f"Failed to save {key} to storage")


class SlowStorage(InMemoryStorage):
    def __init__(self):
        super().__init__()
        self.writes = []

    async def save(self, key, value):
        await asyncio.sleep(0.01)
        self.writes.append(value)
        await super().save(key, value)


async def test_json_file_storage_roundtrip(tmp_path):
    storage = JsonFileStorage(str(tmp_path / "store"))

    assert await storage.load("cart") is None
    await storage.save("cart", '{"items": []}')
    assert await storage.load("cart") == '{"items": []}'
    assert (tmp_path / "store" / "cart.json").exists()

    await storage.remove("cart")
    await storage.remove("cart")
    assert await storage.load("cart") is None


async def test_persistence_failure_does_not_block_mutation():
    persister = CartPersister(FailingStorage())
    store = CartStore(persister=persister)

    state = store.add_item(make_item(price=120))
    await persister.flush()

    assert state.summary.item_total == 120
    assert store.state.summary.item_total == 120


async def test_latest_snapshot_wins():
    storage = SlowStorage()
    persister = CartPersister(storage)
    store = CartStore(persister=persister)

    store.add_item(make_item("p1", item_id="line"))
    store.update_quantity("line", 2)
    store.update_quantity("line", 3)
    await persister.flush()

    final = CartState.model_validate_json(storage.values["cart"])
    assert final.items[0].quantity == 3
    assert len(storage.writes) < 3


async def test_load_snapshot(storage):
    persister = CartPersister(storage)
    await storage.save("cart", CartState(items=[make_item(price=80)]).model_dump_json())

    state = await persister.load()

    assert state.items[0].total_price == 80


async def test_corrupt_snapshot_is_ignored(storage):
    await storage.save("cart", '{"items": "nope"}')

    assert await CartPersister(storage).load() is None


def test_schedule_without_event_loop_is_skipped(storage):
    persister = CartPersister(storage)
    persister.schedule_save(CartState())

    assert persister.pending == 0
    assert storage.values == {}


async def test_undecodable_file_raises_storage_error(tmp_path):
    (tmp_path / "cart.json").write_bytes(b"\xff\xfe\x00garbage")
    storage = JsonFileStorage(str(tmp_path))

    with pytest.raises(StorageError):
        await storage.load("cart")
