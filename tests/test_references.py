"""Tests for reference dispatch."""

from __future__ import annotations

import pytest

from mongo_fieldops.editors import CollectionFieldEditor, DocumentFieldEditor
from mongo_fieldops.exceptions import ArgumentError
from mongo_fieldops.references import FieldOps, resolve
from mongo_fieldops.store import CollectionHandle, DocumentHandle


class TestResolve:
    """Tests for resolve function."""

    def test_document_handle(self, store):
        editor = resolve(store, DocumentHandle(collection="users", id="a"))
        assert isinstance(editor, DocumentFieldEditor)
        assert editor.handle.id == "a"

    def test_collection_handle(self, store):
        editor = resolve(store, CollectionHandle(name="users"), concurrency=4)
        assert isinstance(editor, CollectionFieldEditor)
        assert editor.concurrency == 4

    def test_none_raises(self, store):
        with pytest.raises(ArgumentError):
            resolve(store, None)

    @pytest.mark.parametrize("ref", ["users", {"collection": "users"}, 42])
    def test_unknown_reference_raises(self, store, ref):
        with pytest.raises(ArgumentError):
            resolve(store, ref)


class TestFieldOps:
    """Tests for the FieldOps facade."""

    def test_ref_binds_store(self, store):
        editor = FieldOps(store, concurrency=3).ref(CollectionHandle(name="users"))
        assert editor.store is store
        assert editor.concurrency == 3

    def test_ref_none_raises(self, store):
        with pytest.raises(ArgumentError):
            FieldOps(store).ref(None)

    @pytest.mark.asyncio
    async def test_document_shortcut(self, store):
        store.put("users", "a", {"nme": "Giovanni"})

        await FieldOps(store).document("users", "a").rename_field({"nme": "name"})

        assert store.data("users", "a") == {"name": "Giovanni"}

    @pytest.mark.asyncio
    async def test_collection_shortcut(self, store):
        store.put("users", "a", {"nme": "Giovanni"})

        await FieldOps(store).collection("users").delete_field_across_documents("nme")

        assert store.data("users", "a") == {}

    def test_child_handle(self):
        handle = CollectionHandle(name="users").document("a")
        assert handle == DocumentHandle(collection="users", id="a")
        assert str(handle) == "users/a"
