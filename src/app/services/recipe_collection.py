"""
Whole-collection persistence for recipe lists kept under one storage key.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from src.app.domain.errors import CorruptStateError, PersistenceFailure, StorageBackendError
from src.app.domain.models import RecipeRecord
from src.app.infra.storage.base import KeyValueStore
from src.services.normalizer import normalize_many, to_storage

logger = logging.getLogger(__name__)


@dataclass
class StoredCollection:
    records: list[RecipeRecord] = field(default_factory=list)
    corrupt: bool = False
    # every stored entry as parsed, including ones the normalizer rejected
    entries: list[Any] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.entries) - len(self.records)


def decode_collection(key: str, payload: str) -> list[Any]:
    """
    Parse a stored JSON array of recipes in either schema.

    Returns the entries as parsed; normalizing them is up to the caller.
    An unparsable payload as a whole raises CorruptStateError.
    """
    try:
        data = json.loads(payload)
    except ValueError as exc:
        raise CorruptStateError(key, f"invalid JSON ({exc})") from exc
    if not isinstance(data, list):
        raise CorruptStateError(key, f"expected a list, got {type(data).__name__}")
    return data


async def read_collection(storage: KeyValueStore, key: str) -> StoredCollection:
    """
    Absent key means empty. Corrupt data is logged and treated as empty.
    Entries the normalizer rejects are left out of ``records`` but kept in
    ``entries``.

    Raises:
        PersistenceFailure: the backend could not be read
    """
    try:
        payload = await storage.get_item(key)
    except StorageBackendError as exc:
        raise PersistenceFailure(key, "read", exc.reason) from exc

    if payload is None:
        return StoredCollection()

    try:
        entries = decode_collection(key, payload)
    except CorruptStateError as exc:
        logger.warning("%s; starting from an empty collection", exc)
        return StoredCollection(corrupt=True)
    return StoredCollection(records=normalize_many(entries, origin=key), entries=entries)


async def write_entries(storage: KeyValueStore, key: str, entries: list[Any]) -> None:
    payload = json.dumps(entries, ensure_ascii=False)
    try:
        await storage.set_item(key, payload)
    except StorageBackendError as exc:
        raise PersistenceFailure(key, "write", exc.reason) from exc


async def write_collection(storage: KeyValueStore, key: str, records: Iterable[RecipeRecord]) -> None:
    await write_entries(storage, key, [to_storage(record) for record in records])
