"""
Cart snapshot persistence.

Writes are fire-and-forget: the store schedules them after each commit and
never waits on the result. Each write carries the full state, and a write
superseded by a newer one before it starts is skipped.
"""

import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from ..database.storage import KeyValueStorage
from ..models.cart import CartState

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "cart"


class CartPersister:
    """Schedules cart snapshot writes against a key-value storage"""

    def __init__(self, storage: KeyValueStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._generation = 0
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    def schedule_save(self, state: CartState) -> None:
        """Schedule a write of the full cart snapshot"""
        self._schedule(state.model_dump_json())

    def schedule_remove(self) -> None:
        """Schedule removal of the persisted snapshot"""
        self._schedule(None)

    def _schedule(self, payload: Optional[str]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop - cart snapshot not persisted")
            return

        self._generation += 1
        task = loop.create_task(self._write(self._generation, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _write(self, generation: int, payload: Optional[str]) -> None:
        async with self._lock:
            if generation != self._generation:
                logger.debug(f"Skipping superseded cart snapshot #{generation}")
                return
            try:
                if payload is None:
                    await self.storage.remove(self.key)
                else:
                    await self.storage.save(self.key, payload)
            except Exception:
                # Durability is best-effort; the in-memory state stays authoritative
                logger.exception(f"Failed to persist cart snapshot #{generation}")

    async def load(self) -> Optional[CartState]:
        """Read the persisted snapshot, if any"""
        raw = await self.storage.load(self.key)
        if raw is None:
            return None
        try:
            return CartState.model_validate_json(raw)
        except ValidationError:
            logger.error(f"Ignoring corrupt cart snapshot under key '{self.key}'")
            return None

    async def flush(self) -> None:
        """Wait for all scheduled writes to finish"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    @property
    def pending(self) -> int:
        return len(self._tasks)
