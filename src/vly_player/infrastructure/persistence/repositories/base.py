"""Shared JSON-blob encoding for key-value backed repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from vly_player.domain.shared.exceptions import PersistenceError
from vly_player.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from vly_player.application.interfaces.key_value_store import KeyValueStore

T = TypeVar("T")


class JsonBlob(Generic[T]):
    """One logical collection stored as a single JSON value under ``key``."""

    def __init__(self, store: KeyValueStore, key: str, adapter: TypeAdapter[T]) -> None:
        self._store = store
        self._key = key
        self._adapter = adapter

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> T | None:
        """Decode the stored value, or None when nothing is stored.

        Raises:
            PersistenceError: If the stored value does not decode.
        """
        raw = await self._store.get(self._key)
        if raw is None:
            return None
        try:
            return self._adapter.validate_json(raw)
        except PydanticValidationError as e:
            raise PersistenceError(
                self._key, ErrorMessages.CORRUPT_COLLECTION.format(key=self._key)
            ) from e

    async def save(self, value: T) -> None:
        try:
            raw = self._adapter.dump_json(value).decode()
        except (TypeError, ValueError) as e:
            raise PersistenceError(
                self._key, ErrorMessages.UNSERIALIZABLE_COLLECTION.format(key=self._key)
            ) from e
        await self._store.set(self._key, raw)

    async def clear(self) -> bool:
        return await self._store.delete(self._key)
