from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib_nested_store_attributes.adapters.file_loaders import structured as structured_module
from lib_nested_store_attributes.adapters.file_loaders.structured import JSONBatchLoader, YAMLBatchLoader, loader_for
from lib_nested_store_attributes.domain.errors import BatchFileNotFound, InvalidInputKind


def test_json_loader_valid(tmp_path: Path) -> None:
    path = tmp_path / "batch.json"
    path.write_text(json.dumps([{"isbn": 1234}]), encoding="utf-8")
    assert JSONBatchLoader().load(str(path)) == [{"isbn": 1234}]


def test_json_loader_mapping_batch(tmp_path: Path) -> None:
    path = tmp_path / "batch.json"
    path.write_text('{"1": {"isbn": 1234}}', encoding="utf-8")
    assert JSONBatchLoader().load(str(path)) == {"1": {"isbn": 1234}}


def test_json_loader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(BatchFileNotFound):
        JSONBatchLoader().load(str(tmp_path / "missing.json"))


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "batch.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(InvalidInputKind):
        JSONBatchLoader().load(str(path))


def test_json_loader_scalar_is_not_a_batch(tmp_path: Path) -> None:
    path = tmp_path / "batch.json"
    path.write_text('"just text"', encoding="utf-8")
    with pytest.raises(InvalidInputKind):
        JSONBatchLoader().load(str(path))


@pytest.mark.skipif(structured_module.yaml is None, reason="PyYAML not available")
def test_yaml_loader(tmp_path: Path) -> None:
    path = tmp_path / "batch.yaml"
    path.write_text("- isbn: 1234\n  name: war and peace\n", encoding="utf-8")
    assert YAMLBatchLoader().load(str(path)) == [{"isbn": 1234, "name": "war and peace"}]


@pytest.mark.skipif(structured_module.yaml is None, reason="PyYAML not available")
def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "batch.yaml"
    path.write_text("# empty file\n", encoding="utf-8")
    assert YAMLBatchLoader().load(str(path)) == []


def test_loader_for_suffix() -> None:
    assert isinstance(loader_for("a.YML"), YAMLBatchLoader)
    assert isinstance(loader_for("a.json"), JSONBatchLoader)
    assert isinstance(loader_for("a"), JSONBatchLoader)
