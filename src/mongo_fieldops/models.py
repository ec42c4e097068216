from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from beanie import Document
from pydantic import Field


class FieldOperationRun(Document):
    database: str
    collection: str
    operation: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    document_id: Optional[str] = None
    documents: int
    mutated: int
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "field_operation_runs"
