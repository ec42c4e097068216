from __future__ import annotations

from typing import Any, Optional, Union

from mongo_fieldops.editors import CollectionFieldEditor, DocumentFieldEditor
from mongo_fieldops.exceptions import ArgumentError
from mongo_fieldops.store import CollectionHandle, DocumentHandle, DocumentStore

Reference = Union[DocumentHandle, CollectionHandle]


def resolve(
    store: DocumentStore,
    ref: Any,
    concurrency: Optional[int] = None,
) -> Union[DocumentFieldEditor, CollectionFieldEditor]:
    """Return the editor matching the kind of reference."""
    if ref is None:
        raise ArgumentError("A document or collection reference is required")
    if isinstance(ref, DocumentHandle):
        return DocumentFieldEditor(store, ref)
    if isinstance(ref, CollectionHandle):
        return CollectionFieldEditor(store, ref, concurrency=concurrency)
    raise ArgumentError(f"Expected a DocumentHandle or CollectionHandle, got {type(ref).__name__}")


class FieldOps:
    """Entry point bound to one store: ``FieldOps(store).ref(handle)``."""

    def __init__(self, store: DocumentStore, concurrency: Optional[int] = None):
        self.store = store
        self.concurrency = concurrency

    def ref(self, ref: Reference) -> Union[DocumentFieldEditor, CollectionFieldEditor]:
        return resolve(self.store, ref, concurrency=self.concurrency)

    def collection(self, name: str) -> CollectionFieldEditor:
        return CollectionFieldEditor(self.store, CollectionHandle(name=name), concurrency=self.concurrency)

    def document(self, collection: str, doc_id: Any) -> DocumentFieldEditor:
        return DocumentFieldEditor(self.store, DocumentHandle(collection=collection, id=doc_id))
