"""
Test doubles for the storage and identity seams.

``InMemoryStore`` implements ``DocumentStore`` with Firestore's query
semantics for the operators the services use (missing fields never
match, cursors resume strictly after the cursor document's position,
ties on the ordering field are broken by document id).
"""

import asyncio
import copy
import itertools
from collections import defaultdict
from typing import Dict, Mapping

from camptogether_api.app.core.db import DocumentStore, FirestoreOperators, OrderByDirection
from camptogether_api.app.core.security import Identity, IdentityVerifier, InvalidToken


HOST = Identity(id="host-1", email="host@example.com", display_name="Hannah Host", picture="https://img.example/h.png")
GUEST = Identity(id="guest-1", email="guest@example.com", display_name="Gabe Guest")
STRANGER = Identity(id="stranger-1", email="stranger@example.com", display_name="Sam Stranger")
ADMIN = Identity(id="admin-1", email="Boss@Example.com", display_name="The Boss")

ADMIN_EMAILS = frozenset({"boss@example.com"})

TOKENS = {
    "host-token": HOST,
    "guest-token": GUEST,
    "stranger-token": STRANGER,
    "admin-token": ADMIN,
}

_MISSING = object()


def _matches(doc, field, op, value):
    current = doc.get(field, _MISSING)
    if current is _MISSING:
        return False
    if op == FirestoreOperators.EQ:
        return current == value
    if op == FirestoreOperators.ARRAY_CONTAINS:
        return isinstance(current, list) and value in current
    if op == FirestoreOperators.IN:
        return current in value
    if op == FirestoreOperators.GTE:
        return current >= value
    if op == FirestoreOperators.LTE:
        return current <= value
    if op == FirestoreOperators.GT:
        return current > value
    if op == FirestoreOperators.LT:
        return current < value
    raise ValueError(f"Unsupported operator {op}")


class InMemoryStore(DocumentStore):
    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = defaultdict(dict)
        self.transaction_lock = asyncio.Lock()
        self._ids = itertools.count(1)

    def _col(self, collection):
        return self.collections[str(collection)]

    @staticmethod
    def _with_id(doc_id, data):
        document = copy.deepcopy(data)
        document["id"] = doc_id
        return document

    async def get(self, collection, doc_id):
        data = self._col(collection).get(doc_id)
        return None if data is None else self._with_id(doc_id, data)

    async def add(self, collection, data):
        doc_id = f"{collection}-{next(self._ids)}"
        self._col(collection)[doc_id] = copy.deepcopy(dict(data))
        return doc_id

    async def set(self, collection, doc_id, data):
        self._col(collection)[doc_id] = copy.deepcopy(dict(data))

    async def update(self, collection, doc_id, updates):
        # Firestore refuses to update a missing document.
        self._col(collection)[doc_id].update(copy.deepcopy(dict(updates)))

    async def delete(self, collection, doc_id):
        self._col(collection).pop(doc_id, None)

    async def array_union(self, collection, doc_id, field, values):
        current = self._col(collection)[doc_id].setdefault(field, [])
        for value in values:
            if value not in current:
                current.append(value)

    async def query(self, collection, filters=None, order_by=None, limit=None, start_after=None):
        col = self._col(collection)
        documents = [
            self._with_id(doc_id, data)
            for doc_id, data in col.items()
            if all(_matches(data, field, op, value) for field, op, value in filters or [])
        ]
        fields = [field for field, _ in order_by or []]
        descending = bool(order_by) and order_by[0][1] == OrderByDirection.DESCENDING

        def key(doc: Mapping):
            return tuple(doc[f] for f in fields) + (doc["id"],)

        documents.sort(key=key, reverse=descending)
        if start_after and start_after in col:
            cursor_key = key(self._with_id(start_after, col[start_after]))
            if descending:
                documents = [doc for doc in documents if key(doc) < cursor_key]
            else:
                documents = [doc for doc in documents if key(doc) > cursor_key]
        if limit is not None:
            documents = documents[:limit]
        return documents

    async def run_transaction(self, collection, doc_id, fn):
        async with self.transaction_lock:
            current = await self.get(collection, doc_id)
            # Yield so that unsynchronised readers would interleave here.
            await asyncio.sleep(0)
            updates, result = fn(current)
            if updates:
                await self.update(collection, doc_id, updates)
            return result


class StaticTokenVerifier(IdentityVerifier):
    """Accepts a fixed set of tokens."""

    def __init__(self, tokens: Mapping[str, Identity]):
        self.tokens = dict(tokens)
        self.calls = []

    async def verify(self, token):
        self.calls.append(token)
        try:
            return self.tokens[token]
        except KeyError:
            raise InvalidToken("unknown token") from None


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
