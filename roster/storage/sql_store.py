"""
SQLAlchemy-backed document store
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from roster.error_handlers.exceptions import ResourceNotFoundException, StorageException
from roster.storage.base import DocumentStore

logger = logging.getLogger(__name__)


class SQLAlchemyDocumentStore(DocumentStore):
    """
    Document store on top of the ``documents`` table

    Args:
        db: Flask-SQLAlchemy instance
        document_model: Document model class from create_document_model()
    """

    def __init__(self, db, document_model):
        self.db = db
        self.Document = document_model

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.session.rollback()
            error_id = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')
            logger.error(f"Storage failure [{error_id}] during {operation}: {e}", exc_info=True)
            raise StorageException(error_id, operation) from e

    def _find(self, collection: str, doc_id: str):
        return self.db.session.get(self.Document, (collection, doc_id))

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._guard(f"get {collection}/{doc_id}"):
            document = self._find(collection, doc_id)
            return document.to_dict() if document else None

    def list(self, collection: str, **filters: Any) -> List[Dict[str, Any]]:
        with self._guard(f"list {collection}"):
            documents = self.db.session.query(self.Document).filter(
                self.Document.collection == collection
            ).order_by(self.Document.doc_id).all()
        results = [d.to_dict() for d in documents]
        if filters:
            results = [
                r for r in results
                if all(r.get(key) == value for key, value in filters.items())
            ]
        return results

    def list_range(self, collection: str, start_id: str, end_id: str) -> List[Dict[str, Any]]:
        with self._guard(f"list_range {collection}"):
            documents = self.db.session.query(self.Document).filter(
                self.Document.collection == collection,
                self.Document.doc_id >= start_id,
                self.Document.doc_id <= end_id
            ).order_by(self.Document.doc_id).all()
            return [d.to_dict() for d in documents]

    def _upsert(self, collection: str, doc_id: str, data: Dict[str, Any]):
        payload = {**data, 'id': doc_id}
        document = self._find(collection, doc_id)
        if document:
            document.data = payload
            document.updated_at = datetime.utcnow()
        else:
            document = self.Document(collection=collection, doc_id=doc_id, data=payload)
            self.db.session.add(document)
        return document

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._guard(f"set {collection}/{doc_id}"):
            document = self._upsert(collection, doc_id, data)
            self.db.session.commit()
            return document.to_dict()

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        with self._guard(f"update {collection}/{doc_id}"):
            document = self._find(collection, doc_id)
            if not document:
                raise ResourceNotFoundException(f"{collection} document {doc_id} not found")
            # JSON columns only track reassignment
            document.data = {**document.data, **changes, 'id': doc_id}
            document.updated_at = datetime.utcnow()
            self.db.session.commit()
            return document.to_dict()

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._guard(f"delete {collection}/{doc_id}"):
            document = self._find(collection, doc_id)
            if not document:
                return False
            self.db.session.delete(document)
            self.db.session.commit()
            return True

    def commit_batch(self, operations: List[Tuple[str, str, str, Optional[Dict[str, Any]]]]) -> None:
        with self._guard(f"batch of {len(operations)} operations"):
            try:
                for action, collection, doc_id, data in operations:
                    if action == 'set':
                        self._upsert(collection, doc_id, data)
                    elif action == 'delete':
                        document = self._find(collection, doc_id)
                        if document:
                            self.db.session.delete(document)
                    else:
                        raise ValueError(f"Unknown batch action: {action}")
                    # Later operations in the same batch must see earlier ones
                    self.db.session.flush()
                self.db.session.commit()
            except ValueError:
                self.db.session.rollback()
                raise
