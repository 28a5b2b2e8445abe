"""
Generic resource storage: the CRUD contract and its in-memory implementation.
"""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterable, List, Mapping, Optional, Type

from ..util.logging import logger
from .patch import PatchCoercionError, PatchValue, apply_patch
from .schema import NOT_FOUND, Collection, RecordT, now_millis


class ResourceStore(ABC, Generic[RecordT]):
    """Abstract interface for keyed record storage.

    Missing keys are never an exception: lookups return None, delete
    returns False and batch_get records a NOT_FOUND code.
    """

    @abstractmethod
    def create(self, item: RecordT) -> RecordT:
        """Store a new item, minting its id and timestamps as needed."""
        pass

    @abstractmethod
    def get(self, record_id: str) -> Optional[RecordT]:
        """Return the item stored under record_id, or None."""
        pass

    @abstractmethod
    def batch_get(self, record_ids: Iterable[str]) -> Collection[RecordT]:
        """Look up several ids; each lands in results or errors."""
        pass

    @abstractmethod
    def list_all(self, filters: Optional[Mapping[str, str]] = None) -> List[RecordT]:
        """Return every item matching all filters (all items when none given)."""
        pass

    @abstractmethod
    def update(self, record_id: str, item: RecordT) -> Optional[RecordT]:
        """Replace an existing item. Returns None when record_id is absent."""
        pass

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Remove an item. Returns whether anything was removed."""
        pass

    @abstractmethod
    def exists(self, record_id: str) -> bool:
        """Presence check."""
        pass

    @abstractmethod
    def patch(self, record_id: str, patch_map: Mapping[str, PatchValue]) -> Optional[RecordT]:
        """Apply a sparse update. Returns None when record_id is absent."""
        pass


class InMemoryStore(ResourceStore[RecordT]):
    """Thread-safe dict-backed store for one record type.

    Every single operation holds the store lock while it touches the map.
    patch() is a read followed by an update with no lock across the two
    steps: concurrent patches of one key are last-writer-wins on the
    whole record, and a patch racing a delete returns None.

    Items are copied on the way in and out, so changes made to a returned
    item are not persisted until passed back through update().
    """

    def __init__(self, record_type: Type[RecordT]):
        self.record_type = record_type
        self.entity = record_type.__name__
        self._items: Dict[str, RecordT] = {}
        self._lock = threading.Lock()

    def create(self, item: RecordT) -> RecordT:
        item = copy.copy(item)
        if not item.id:
            item.id = str(uuid.uuid4())

        # Timestamps are epoch milliseconds; createdAt may be supplied by the caller
        now = now_millis()
        if item.created_at is None:
            item.created_at = now
        item.updated_at = now

        with self._lock:
            self._items[item.id] = item

        logger.log_store_operation("create", item.id, self.entity)
        return copy.copy(item)

    def get(self, record_id: str) -> Optional[RecordT]:
        with self._lock:
            item = self._items.get(record_id)
        return copy.copy(item) if item is not None else None

    def batch_get(self, record_ids: Iterable[str]) -> Collection[RecordT]:
        collection: Collection[RecordT] = Collection()

        for record_id in record_ids:
            item = self.get(record_id)
            if item is not None:
                collection.add_result(record_id, item)
            else:
                collection.add_error(record_id, NOT_FOUND)

        logger.log_batch_operation("batch_get", self.entity, len(collection), len(collection.results))
        return collection

    def list_all(self, filters: Optional[Mapping[str, str]] = None) -> List[RecordT]:
        with self._lock:
            snapshot = list(self._items.values())

        if filters:
            snapshot = [item for item in snapshot if self._matches(item, filters)]
        return [copy.copy(item) for item in snapshot]

    def update(self, record_id: str, item: RecordT) -> Optional[RecordT]:
        item = copy.copy(item)
        item.id = record_id

        with self._lock:
            existing = self._items.get(record_id)
            if existing is None:
                return None
            item.created_at = existing.created_at
            item.updated_at = now_millis()
            self._items[record_id] = item

        logger.log_store_operation("update", record_id, self.entity)
        return copy.copy(item)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            removed = self._items.pop(record_id, None) is not None

        if removed:
            logger.log_store_operation("delete", record_id, self.entity)
        return removed

    def exists(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._items

    def patch(self, record_id: str, patch_map: Mapping[str, PatchValue]) -> Optional[RecordT]:
        existing = self.get(record_id)
        if existing is None:
            return None

        try:
            patched = apply_patch(existing, patch_map)
        except PatchCoercionError as e:
            logger.log_contract_violation("patch", self.entity, record_id, e)
            raise

        return self.update(record_id, patched)

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        """Remove every item."""
        with self._lock:
            self._items.clear()

    def _matches(self, item: RecordT, filters: Mapping[str, str]) -> bool:
        schema = item.schema()
        for key, wanted in filters.items():
            spec = schema.filter_field(key)
            if spec is None:
                # Unknown filter keys are ignored
                continue
            if wanted is None:
                continue
            if not spec.matches_filter(getattr(item, spec.attr), str(wanted)):
                return False
        return True
