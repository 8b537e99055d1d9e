"""Key-value storage adapters for cart persistence"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..core.errors import StorageError


class KeyValueStorage(ABC):
    """Async string key-value store"""

    @abstractmethod
    async def save(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def load(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        ...


class InMemoryStorage(KeyValueStorage):
    """In-memory storage, lost on restart"""

    def __init__(self):
        self.values: dict[str, str] = {}

    async def save(self, key: str, value: str) -> None:
        self.values[key] = value

    async def load(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def remove(self, key: str) -> None:
        self.values.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """
    File-backed storage, one <key>.json file per key.

    Blocking file IO runs in a worker thread.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    async def save(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to save {key} to storage") from e

    async def load(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, key)
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to retrieve {key} from storage") from e

    async def remove(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete, key)
        except (OSError, UnicodeError) as e:
            raise StorageError(f"Failed to remove {key} from storage") from e
