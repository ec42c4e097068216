"""Bulk field rename, delete and import for MongoDB collections."""

from __future__ import annotations

__version__ = "0.1.0"

from mongo_fieldops.editors import CollectionFieldEditor, DocumentFieldEditor, FieldRenameSpec
from mongo_fieldops.exceptions import ArgumentError, ConfigurationError, FieldOpsError
from mongo_fieldops.references import FieldOps, Reference, resolve
from mongo_fieldops.store import (
    DELETE_FIELD,
    CollectionHandle,
    DocumentHandle,
    DocumentStore,
    MotorStore,
    Snapshot,
    WriteAck,
)

__all__ = [
    "__version__",
    "ArgumentError",
    "CollectionFieldEditor",
    "CollectionHandle",
    "ConfigurationError",
    "DELETE_FIELD",
    "DocumentFieldEditor",
    "DocumentHandle",
    "DocumentStore",
    "FieldOps",
    "FieldOpsError",
    "FieldRenameSpec",
    "MotorStore",
    "Reference",
    "Snapshot",
    "WriteAck",
    "resolve",
]
