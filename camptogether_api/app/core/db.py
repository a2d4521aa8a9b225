"""
Document store access.

Services talk to a ``DocumentStore``: a small collection-oriented interface
offering get-by-id, filtered and ordered queries with cursor pagination,
single-document transactions and array-union updates.  The production
implementation, ``FirestoreStore``, wraps the asynchronous Firestore
client.  Documents travel as plain dicts; the document id is exposed
under the ``"id"`` key and never written into the stored body.

The store is a lazily created process-wide handle.  ``get_store`` builds
it from settings on first use; ``init_store`` injects a different backend
(the test suite uses an in-memory store).
"""

import logging
import os
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from google.cloud.firestore_v1 import ArrayUnion, AsyncClient
from google.cloud.firestore_v1.async_transaction import async_transactional
from google.cloud.firestore_v1.base_query import FieldFilter

from .config import Settings, settings

logger = logging.getLogger(__name__)


class Collections(str, Enum):
    USERS = "users"
    EVENTS = "events"
    CHECKLIST_ITEMS = "checklist_items"
    EXPENSES = "expenses"

    def __str__(self):
        return self.value


class FirestoreOperators(str, Enum):
    LT = "<"
    LTE = "<="
    EQ = "=="
    GT = ">"
    GTE = ">="
    IN = "in"
    ARRAY_CONTAINS = "array_contains"


class OrderByDirection(str, Enum):
    DESCENDING = "DESCENDING"
    ASCENDING = "ASCENDING"

    def __str__(self):
        return self.value


Document = Dict[str, Any]
Filter = Tuple[str, FirestoreOperators, Any]
Ordering = Tuple[str, OrderByDirection]
# Receives the current document (or None) and returns (updates, result).
# Raising aborts the transaction without writing.
TransactionFn = Callable[[Optional[Document]], Tuple[Optional[Document], Any]]


class DocumentStore:
    """Interface every storage backend implements."""

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def add(self, collection: str, data: Document) -> str:
        """Create a document with a generated id and return that id."""
        raise NotImplementedError

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, updates: Document) -> None:
        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    async def array_union(self, collection: str, doc_id: str, field: str, values: Sequence[Any]) -> None:
        """Add ``values`` to an array field, skipping those already present."""
        raise NotImplementedError

    async def query(
        self,
        collection: str,
        filters: Optional[List[Filter]] = None,
        order_by: Optional[List[Ordering]] = None,
        limit: Optional[int] = None,
        start_after: Optional[str] = None,
    ) -> List[Document]:
        """Run a filtered query.

        ``start_after`` is a document id; results resume strictly after that
        document's position in the requested ordering.  An id that does not
        exist is ignored and the first page is returned.
        """
        raise NotImplementedError

    async def run_transaction(self, collection: str, doc_id: str, fn: TransactionFn) -> Any:
        """Atomically read one document, apply ``fn`` and write its updates."""
        raise NotImplementedError


class FirestoreStore(DocumentStore):
    """``DocumentStore`` backed by ``google.cloud.firestore_v1.AsyncClient``."""

    def __init__(self, client: AsyncClient):
        self.client = client

    @classmethod
    def from_settings(cls, config: Settings) -> "FirestoreStore":
        if config.firestore_emulator_host:
            os.environ["FIRESTORE_EMULATOR_HOST"] = config.firestore_emulator_host
            logger.info("Using Firestore emulator on %s", config.firestore_emulator_host)
        client = AsyncClient(project=config.firebase_project_id, database=config.firestore_database)
        return cls(client)

    def _doc(self, collection: str, doc_id: str):
        return self.client.collection(str(collection)).document(doc_id)

    @staticmethod
    def _to_document(snapshot) -> Document:
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return data

    async def get(self, collection, doc_id):
        snapshot = await self._doc(collection, doc_id).get()
        if not snapshot.exists:
            return None
        return self._to_document(snapshot)

    async def add(self, collection, data):
        doc_ref = self.client.collection(str(collection)).document()
        await doc_ref.set(data)
        return doc_ref.id

    async def set(self, collection, doc_id, data):
        await self._doc(collection, doc_id).set(data)

    async def update(self, collection, doc_id, updates):
        logger.debug("Update: %s - id=%s, fields=%s", collection, doc_id, sorted(updates))
        await self._doc(collection, doc_id).update(updates)

    async def delete(self, collection, doc_id):
        await self._doc(collection, doc_id).delete()

    async def array_union(self, collection, doc_id, field, values):
        await self._doc(collection, doc_id).update({field: ArrayUnion(list(values))})

    async def query(self, collection, filters=None, order_by=None, limit=None, start_after=None):
        query = self.client.collection(str(collection))
        for field_name, op, value in filters or []:
            query = query.where(filter=FieldFilter(field_name, str(op.value), value))
        for field_name, direction in order_by or []:
            query = query.order_by(field_name, direction=str(direction))
        if start_after:
            cursor_snapshot = await self._doc(collection, start_after).get()
            if cursor_snapshot.exists:
                query = query.start_after(cursor_snapshot)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_document(snapshot) async for snapshot in query.stream()]

    async def run_transaction(self, collection, doc_id, fn):
        doc_ref = self._doc(collection, doc_id)

        @async_transactional
        async def _apply(transaction):
            snapshot = await doc_ref.get(transaction=transaction)
            current = self._to_document(snapshot) if snapshot.exists else None
            updates, result = fn(current)
            if updates:
                transaction.update(doc_ref, updates)
            return result

        return await _apply(self.client.transaction())


_store: Optional[DocumentStore] = None


def init_store(store: Optional[DocumentStore]) -> None:
    """Inject the store used by all services (``None`` resets to lazy init)."""
    global _store
    _store = store


def get_store() -> DocumentStore:
    global _store
    if _store is None:
        _store = FirestoreStore.from_settings(settings)
    return _store
