"""Tests for loading import files."""

from __future__ import annotations

import json

import pytest
import yaml

from mongo_fieldops.document_io import load_documents, write_report
from mongo_fieldops.exceptions import ArgumentError


class TestLoadDocuments:
    """Tests for load_documents function."""

    def test_json_list(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"uid": "1"}, {"uid": "2", "name": "X"}]))

        assert load_documents(path) == [{"uid": "1"}, {"uid": "2", "name": "X"}]

    def test_yaml_single_document(self, tmp_path):
        path = tmp_path / "user.yml"
        path.write_text("id: u1\nname: Giovanni\n")

        assert load_documents(path) == [{"id": "u1", "name": "Giovanni"}]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("")

        assert load_documents(path) == []

    def test_scalar_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("42")

        with pytest.raises(ArgumentError):
            load_documents(path)

    def test_non_document_item_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"uid": "1"}, "oops"]))

        with pytest.raises(ArgumentError, match="item 1"):
            load_documents(path)

    def test_tab_indented_json(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"uid": "1", "name": "X"}], indent="\t"))

        assert load_documents(path) == [{"uid": "1", "name": "X"}]

    def test_truncated_json_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('[{"uid": "1"')

        with pytest.raises(ArgumentError, match="invalid JSON"):
            load_documents(path)

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("- uid: 1\n  name: [unclosed\n")

        with pytest.raises(ArgumentError, match="invalid YAML"):
            load_documents(path)


def test_write_report_creates_parents(tmp_path):
    path = tmp_path / "reports" / "run.yml"

    write_report(path, {"operation": "delete_field", "documents": 2})

    assert yaml.safe_load(path.read_text()) == {"operation": "delete_field", "documents": 2}
