"""End-to-end CLI coverage for the commands exposed by lib_nested_store_attributes."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

import lib_cli_exit_tools
import pytest

from lib_nested_store_attributes import cli
from lib_nested_store_attributes.domain.errors import InvalidInputKind, TooManyRecords

BOOKS = [{"isbn": 1234, "name": "war, what is it good for"}, {"isbn": 5678, "name": "the borg"}]


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def test_cli_reconcile_outputs_json(tmp_path: Path) -> None:
    existing = _write(tmp_path / "books.json", BOOKS)
    incoming = _write(
        tmp_path / "batch.json",
        [{"isbn": 1234, "name": "war and peace"}, {"isbn": 5678, "_destroy": True}, {"isbn": 9100, "title": "moon landing"}],
    )
    result = _runner().invoke(
        cli.cli,
        [
            "reconcile",
            "--existing",
            str(existing),
            "--incoming",
            str(incoming),
            "--primary-key",
            "isbn",
            "--allow-destroy",
        ],
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == [{"isbn": 1234, "name": "war and peace"}, {"isbn": 9100, "title": "moon landing"}]


def test_cli_reconcile_without_existing(tmp_path: Path) -> None:
    incoming = _write(tmp_path / "batch.json", {"0": {"id": 1, "name": "first"}, "1": {"name": ""}})
    result = _runner().invoke(cli.cli, ["reconcile", "--incoming", str(incoming), "--reject-all-blank"])
    assert result.exit_code == 0
    assert json.loads(result.output) == [{"name": "first"}]


def test_cli_reconcile_yaml_batch(tmp_path: Path) -> None:
    pytest.importorskip("yaml")
    existing = _write(tmp_path / "books.json", BOOKS)
    incoming = tmp_path / "batch.yaml"
    incoming.write_text("isbn: 5678\nname: the borg returns\n", encoding="utf-8")
    result = _runner().invoke(
        cli.cli,
        ["reconcile", "--existing", str(existing), "--incoming", str(incoming), "--primary-key", "isbn", "--indent", "2"],
    )
    assert result.exit_code == 0
    assert json.loads(result.output)[0] == {"isbn": 5678, "name": "the borg returns"}


def test_cli_reconcile_limit_exceeded(tmp_path: Path) -> None:
    incoming = _write(tmp_path / "batch.json", [{"name": "a"}, {"name": "b"}])
    result = _runner().invoke(cli.cli, ["reconcile", "--incoming", str(incoming), "--limit", "1"])
    assert result.exit_code != 0
    assert isinstance(result.exception, TooManyRecords)


def test_cli_reconcile_rejects_scalar_batch(tmp_path: Path) -> None:
    incoming = _write(tmp_path / "batch.json", "not a batch")
    result = _runner().invoke(cli.cli, ["reconcile", "--incoming", str(incoming)])
    assert isinstance(result.exception, InvalidInputKind)


def test_main_returns_non_zero_exit_code_on_errors(tmp_path: Path) -> None:
    incoming = _write(tmp_path / "batch.json", [{"name": "a"}, {"name": "b"}])
    assert cli.main(["reconcile", "--incoming", str(incoming), "--limit", "1"]) != 0


def test_main_returns_zero_on_success(tmp_path: Path) -> None:
    incoming = _write(tmp_path / "batch.json", [{"name": "a"}])
    assert cli.main(["reconcile", "--incoming", str(incoming)]) == 0


def test_cli_info_handles_missing_metadata(monkeypatch) -> None:
    """`cli info` must degrade gracefully when package metadata is unavailable."""

    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_main_restores_traceback_flag(tmp_path: Path) -> None:
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    incoming = _write(tmp_path / "batch.json", [{"name": "a"}])
    exit_code = cli.main(["--traceback", "reconcile", "--incoming", str(incoming)], restore_traceback=True)
    assert exit_code == 0
    assert getattr(lib_cli_exit_tools.config, "traceback", False) == previous_traceback


def test_cli_version_option() -> None:
    result = _runner().invoke(cli.cli, ["--version"])
    assert result.exit_code == 0
    assert "lib_nested_store_attributes version" in result.output
