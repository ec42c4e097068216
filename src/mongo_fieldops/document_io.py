from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml

from mongo_fieldops.exceptions import ArgumentError


def _parse(path: Path) -> Any:
    text = path.read_text()
    if path.suffix.lower() == ".json":
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ArgumentError(f"{path}: invalid JSON: {e}") from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ArgumentError(f"{path}: invalid YAML: {e}") from e


def load_documents(path: Path) -> List[Dict[str, Any]]:
    """Read documents to import from a JSON or YAML file.

    ``.json`` files are parsed as JSON, anything else as YAML. The file holds
    either a list of mappings or a single mapping.
    """
    data = _parse(path)
    if not data:
        return []
    if isinstance(data, dict):
        return [data]
    if not isinstance(data, list):
        raise ArgumentError(f"{path} must contain a document or a list of documents")

    for index, doc in enumerate(data):
        if not isinstance(doc, dict):
            raise ArgumentError(f"{path}: item {index} is not a document")
    return data


def write_report(path: Path, payload: Dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(payload, sort_keys=False))
    return path
