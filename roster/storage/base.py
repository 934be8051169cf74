"""
Storage port
Keyed document collections with get/set/update/delete and atomic batch writes
"""
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

# Collection names
EMPLOYEES = 'employees'
HOLIDAYS = 'holidays'
VACATIONS = 'vacations'
SCHEDULE = 'schedule'
ROTATION_META = 'rotationMeta'
SCHEDULE_STATUS = 'scheduleStatus'


class WriteBatch:
    """
    Collects set/delete operations and applies them all-or-nothing

    Usage:
        batch = store.batch()
        batch.set('schedule', '2025-07-01', entry)
        batch.delete('scheduleStatus', '2025-07')
        batch.commit()
    """

    def __init__(self, store: 'DocumentStore'):
        self._store = store
        self._operations: List[Tuple[str, str, str, Optional[Dict[str, Any]]]] = []
        self._committed = False

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> 'WriteBatch':
        self._operations.append(('set', collection, doc_id, dict(data)))
        return self

    def delete(self, collection: str, doc_id: str) -> 'WriteBatch':
        self._operations.append(('delete', collection, doc_id, None))
        return self

    def commit(self) -> int:
        """Apply every queued operation in one transaction; returns the operation count."""
        if self._committed:
            raise RuntimeError('Batch already committed')
        self._store.commit_batch(self._operations)
        self._committed = True
        return len(self._operations)

    def __len__(self) -> int:
        return len(self._operations)


class DocumentStore(ABC):
    """
    Abstract document store

    Documents are plain dicts. Every returned document carries its key under
    ``id``. Implementations raise StorageException on backend failures.
    """

    def new_id(self) -> str:
        return uuid.uuid4().hex[:20]

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document or None."""

    @abstractmethod
    def list(self, collection: str, **filters: Any) -> List[Dict[str, Any]]:
        """All documents of a collection whose fields equal the given filters."""

    @abstractmethod
    def list_range(self, collection: str, start_id: str, end_id: str) -> List[Dict[str, Any]]:
        """Documents whose id falls in [start_id, end_id], ordered by id."""

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create or overwrite a document."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Merge changes into an existing document (ResourceNotFoundException if absent)."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        """Remove a document; returns False when it did not exist."""

    @abstractmethod
    def commit_batch(self, operations: List[Tuple[str, str, str, Optional[Dict[str, Any]]]]) -> None:
        """Apply ('set'|'delete', collection, doc_id, data) operations atomically."""

    def batch(self) -> WriteBatch:
        return WriteBatch(self)
