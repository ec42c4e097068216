from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Mapping, NamedTuple, Optional, Union

from mongo_fieldops.exceptions import ArgumentError
from mongo_fieldops.store import (
    DELETE_FIELD,
    CollectionHandle,
    DocumentHandle,
    DocumentStore,
    WriteAck,
)

logger = logging.getLogger(__name__)

RenameOutcome = Union[None, WriteAck, List[WriteAck]]


class FieldRenameSpec(NamedTuple):
    old_key: str
    new_key: str

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "FieldRenameSpec":
        """Take the first ``{old: new}`` pair of a mapping.

        Any further pairs are ignored.
        """
        entries = list(mapping.items()) if mapping else []
        if not entries:
            raise ArgumentError("Rename needs a {old_field: new_field} mapping")
        if len(entries) > 1:
            logger.debug(f"Ignoring {len(entries) - 1} extra rename pair(s): {entries[1:]}")
        old_key, new_key = entries[0]
        return cls(old_key, new_key)


def _has_value(data: Dict[str, Any], key: str) -> bool:
    # Falsy values (0, "", False, None, empty containers) count as absent.
    return bool(data.get(key))


async def _fan_out(operations: List[Awaitable[Any]], concurrency: Optional[int] = None) -> List[Any]:
    """Run every operation concurrently and return results in input order.

    Waits for every operation to settle, then raises the first failure in
    input order. Sibling operations are never cancelled.
    """
    if concurrency and concurrency > 0:
        sem = asyncio.Semaphore(concurrency)

        async def bounded(op: Awaitable[Any]) -> Any:
            async with sem:
                return await op

        operations = [bounded(op) for op in operations]

    tasks = [asyncio.ensure_future(op) for op in operations]
    results = await asyncio.gather(*tasks, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


class DocumentFieldEditor:
    """Rename or delete fields of a single document."""

    def __init__(self, store: DocumentStore, handle: DocumentHandle):
        self.store = store
        self.handle = handle

    async def rename_field(self, mapping: Union[Mapping[str, str], FieldRenameSpec]) -> RenameOutcome:
        """Move the value of ``old`` to ``new`` for ``{old: new}``.

        Returns ``None`` when nothing had to change:

        - the document does not exist
        - ``old`` has no value (whether or not ``new`` has one)

        When both fields have a value, ``new`` wins and only ``old`` is
        deleted. Otherwise ``new`` is set and ``old`` deleted concurrently,
        so a crash in between leaves both keys; running the rename again
        falls into the "both present" case and finishes the cleanup.
        """
        spec = mapping if isinstance(mapping, FieldRenameSpec) else FieldRenameSpec.from_mapping(mapping)
        old_key, new_key = spec

        snapshot = await self.store.get(self.handle)
        if not snapshot.exists:
            logger.debug(f"{self.handle} does not exist, nothing to rename")
            return None

        data = snapshot.data
        has_old = _has_value(data, old_key)
        has_new = _has_value(data, new_key)

        if not has_old:
            return None

        if has_new:
            logger.debug(f"{self.handle}: '{new_key}' already set, dropping '{old_key}'")
            return await self.store.update(self.handle, {old_key: DELETE_FIELD})

        logger.debug(f"{self.handle}: moving '{old_key}' to '{new_key}'")
        return await _fan_out(
            [
                self.store.update(self.handle, {new_key: data[old_key]}),
                self.store.update(self.handle, {old_key: DELETE_FIELD}),
            ]
        )

    async def delete_field(self, key: str) -> WriteAck:
        return await self.store.update(self.handle, {key: DELETE_FIELD})


class CollectionFieldEditor:
    """Fan document operations out over every document of a collection.

    All per-document operations are issued before any is awaited; the
    results come back in listing (or input) order. If one fails, the whole
    call raises that failure once every sibling has settled; sibling writes
    that succeeded are kept.
    """

    def __init__(
        self,
        store: DocumentStore,
        handle: CollectionHandle,
        concurrency: Optional[int] = None,
    ):
        self.store = store
        self.handle = handle
        self.concurrency = concurrency

    async def _editors(self) -> List[DocumentFieldEditor]:
        handles = await self.store.list_documents(self.handle)
        return [DocumentFieldEditor(self.store, doc) for doc in handles]

    async def rename_field_across_documents(self, mapping: Mapping[str, str]) -> List[RenameOutcome]:
        spec = FieldRenameSpec.from_mapping(mapping)
        editors = await self._editors()
        logger.info(
            f"Renaming '{spec.old_key}' to '{spec.new_key}' in {len(editors)} document(s) of '{self.handle}'"
        )
        return await _fan_out([editor.rename_field(spec) for editor in editors], self.concurrency)

    async def delete_field_across_documents(self, key: str) -> List[WriteAck]:
        editors = await self._editors()
        logger.info(f"Deleting '{key}' from {len(editors)} document(s) of '{self.handle}'")
        return await _fan_out([editor.delete_field(key) for editor in editors], self.concurrency)

    async def import_documents(self, *docs: Mapping[str, Any]) -> List[WriteAck]:
        """Write each document under its own ``id`` or a freshly generated one.

        The resolved id is stored in the ``id`` field and the write is a full
        replace of any existing document with that id.
        """
        writes = []
        for doc in docs:
            doc_id = doc.get("id") or self.store.new_id()
            writes.append(self.store.set(self.handle.document(doc_id), {**doc, "id": doc_id}))

        logger.info(f"Importing {len(writes)} document(s) into '{self.handle}'")
        return await _fan_out(writes, self.concurrency)
