"""Shared fixtures: an in-memory DocumentStore."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any, Dict, List, Mapping

import pytest

from mongo_fieldops.store import DELETE_FIELD, CollectionHandle, DocumentHandle, Snapshot, WriteAck


class MemoryStore:
    """DocumentStore keeping collections as dicts of dicts.

    Every call is recorded in ``calls``; ``fail_on`` maps a document id to an
    exception raised by ``update``/``set`` for that document.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[Any, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_on: Dict[Any, Exception] = {}
        self._ids = itertools.count(1)

    def put(self, collection: str, doc_id: Any, data: Dict[str, Any]) -> DocumentHandle:
        self.collections.setdefault(collection, {})[doc_id] = dict(data)
        return DocumentHandle(collection=collection, id=doc_id)

    def data(self, collection: str, doc_id: Any) -> Dict[str, Any]:
        return self.collections[collection][doc_id]

    async def get(self, handle: DocumentHandle) -> Snapshot:
        self.calls.append(("get", handle.id))
        await asyncio.sleep(0)
        doc = self.collections.get(handle.collection, {}).get(handle.id)
        if doc is None:
            return Snapshot(exists=False)
        return Snapshot(exists=True, data=dict(doc))

    async def update(self, handle: DocumentHandle, fields: Mapping[str, Any]) -> WriteAck:
        self.calls.append(("update", handle.id, dict(fields)))
        await asyncio.sleep(0)
        if handle.id in self.fail_on:
            raise self.fail_on[handle.id]
        doc = self.collections.get(handle.collection, {}).get(handle.id)
        if doc is None:
            return WriteAck(document_id=handle.id)
        modified = 0
        for key, value in fields.items():
            if value is DELETE_FIELD:
                if key in doc:
                    del doc[key]
                    modified = 1
            elif doc.get(key) != value:
                doc[key] = value
                modified = 1
        return WriteAck(document_id=handle.id, matched_count=1, modified_count=modified)

    async def set(self, handle: DocumentHandle, document: Mapping[str, Any]) -> WriteAck:
        self.calls.append(("set", handle.id, dict(document)))
        await asyncio.sleep(0)
        if handle.id in self.fail_on:
            raise self.fail_on[handle.id]
        coll = self.collections.setdefault(handle.collection, {})
        existed = handle.id in coll
        coll[handle.id] = dict(document)
        return WriteAck(
            document_id=handle.id,
            matched_count=int(existed),
            modified_count=int(existed),
            upserted=not existed,
        )

    async def list_documents(self, collection: CollectionHandle) -> List[DocumentHandle]:
        self.calls.append(("list", collection.name))
        return [collection.document(doc_id) for doc_id in self.collections.get(collection.name, {})]

    def new_id(self) -> str:
        return f"generated-{next(self._ids)}"


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()
