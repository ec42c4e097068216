"""Store adapter boundary consumed by the field editors.

The editors never talk to MongoDB directly. They work with handles
(``DocumentHandle`` / ``CollectionHandle``) and a ``DocumentStore`` that can
read a snapshot, partially update, fully replace, list a collection and mint
new ids. ``MotorStore`` is the motor-backed implementation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Protocol

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class _DeleteField:
    """Marker value meaning "remove this key" inside ``DocumentStore.update``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE_FIELD"

    def __reduce__(self):
        return (_DeleteField, ())


DELETE_FIELD = _DeleteField()


class DocumentHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection: str
    id: Any

    def __str__(self) -> str:
        return f"{self.collection}/{self.id}"


class CollectionHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    def document(self, doc_id: Any) -> DocumentHandle:
        return DocumentHandle(collection=self.name, id=doc_id)

    def __str__(self) -> str:
        return self.name


class Snapshot(BaseModel):
    exists: bool
    data: Dict[str, Any] = Field(default_factory=dict)


class WriteAck(BaseModel):
    document_id: Any
    matched_count: int = 0
    modified_count: int = 0
    upserted: bool = False


class DocumentStore(Protocol):
    async def get(self, handle: DocumentHandle) -> Snapshot:
        """Read the full current snapshot of a document."""
        ...

    async def update(self, handle: DocumentHandle, fields: Mapping[str, Any]) -> WriteAck:
        """Set or (with ``DELETE_FIELD``) remove the given keys only."""
        ...

    async def set(self, handle: DocumentHandle, document: Mapping[str, Any]) -> WriteAck:
        """Replace the whole document, creating it when missing."""
        ...

    async def list_documents(self, collection: CollectionHandle) -> List[DocumentHandle]:
        """Return a handle for every document of the collection."""
        ...

    def new_id(self) -> str:
        """Generate a fresh unique document id."""
        ...


def build_update(fields: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Translate a partial field mapping into a MongoDB update document."""
    to_set: Dict[str, Any] = {}
    to_unset: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is DELETE_FIELD:
            to_unset[key] = ""
        else:
            to_set[key] = value

    update: Dict[str, Dict[str, Any]] = {}
    if to_set:
        update["$set"] = to_set
    if to_unset:
        update["$unset"] = to_unset
    return update


class MotorStore:
    """``DocumentStore`` over one database of an ``AsyncIOMotorClient``."""

    def __init__(self, client: AsyncIOMotorClient, database: str):
        self.client = client
        self.database = database

    def _collection(self, name: str):
        return self.client[self.database][name]

    async def get(self, handle: DocumentHandle) -> Snapshot:
        doc = await self._collection(handle.collection).find_one({"_id": handle.id})
        if doc is None:
            return Snapshot(exists=False)
        doc.pop("_id", None)
        return Snapshot(exists=True, data=doc)

    async def update(self, handle: DocumentHandle, fields: Mapping[str, Any]) -> WriteAck:
        update = build_update(fields)
        if not update:
            return WriteAck(document_id=handle.id)
        logger.debug(f"update {handle}: {update}")
        result = await self._collection(handle.collection).update_one({"_id": handle.id}, update)
        return WriteAck(
            document_id=handle.id,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    async def set(self, handle: DocumentHandle, document: Mapping[str, Any]) -> WriteAck:
        body = {key: value for key, value in document.items() if key != "_id"}
        logger.debug(f"replace {handle}")
        result = await self._collection(handle.collection).replace_one(
            {"_id": handle.id}, body, upsert=True
        )
        return WriteAck(
            document_id=handle.id,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted=result.upserted_id is not None,
        )

    async def list_documents(self, collection: CollectionHandle) -> List[DocumentHandle]:
        cursor = self._collection(collection.name).find({}, projection={"_id": 1})
        docs = await cursor.to_list(length=None)
        return [collection.document(doc["_id"]) for doc in docs]

    def new_id(self) -> str:
        return str(ObjectId())
