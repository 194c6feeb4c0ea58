"""Structured batch file loaders used by the CLI.

Purpose
-------
Read an incoming batch (or a stored collection) from disk. Loaders are small
wrappers around ``json`` and ``yaml.safe_load`` so error handling and
observability live in one place.

Contents
--------
* :class:`BaseBatchLoader` – shared helpers for reading files and validating
  that the payload has a batch shape.
* :class:`JSONBatchLoader` – JSON loader.
* :class:`YAMLBatchLoader` – optional YAML loader (only available when PyYAML is
  installed).
* :func:`loader_for` – pick a loader from a file suffix.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path

from ...domain.errors import BatchFileNotFound, InvalidInputKind
from ...observability import log_debug, log_error

try:
    import yaml  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    yaml = None  # type: ignore[assignment]


class BaseBatchLoader:
    """Common utilities shared by the batch loaders."""

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`BatchFileNotFound` when missing."""

        file_path = Path(path)
        if not file_path.is_file():
            raise BatchFileNotFound(f"Batch file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("batch_file_read", path=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_batch(data: object, *, path: str) -> Mapping[str, object] | Sequence[object]:
        """Ensure *data* is a mapping or a list, otherwise raise ``InvalidInputKind``.

        Examples
        --------
        >>> BaseBatchLoader._ensure_batch([{"isbn": 1}], path="demo")
        [{'isbn': 1}]
        >>> BaseBatchLoader._ensure_batch(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_nested_store_attributes.domain.errors.InvalidInputKind: File demo did not produce a batch
        """

        if not isinstance(data, (Mapping, list)):
            raise InvalidInputKind(f"File {path} did not produce a batch")
        return data


class JSONBatchLoader(BaseBatchLoader):
    """Load JSON batches using the standard library parser."""

    def load(self, path: str) -> Mapping[str, object] | Sequence[object]:
        try:
            data = json.loads(self._read(path).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            log_error("batch_file_invalid", path=path, format="json", error=str(exc))
            raise InvalidInputKind(f"Invalid JSON in {path}: {exc}") from exc
        return self._ensure_batch(data, path=path)


class YAMLBatchLoader(BaseBatchLoader):
    """Load YAML batches when PyYAML is available; empty files yield an empty list."""

    def load(self, path: str) -> Mapping[str, object] | Sequence[object]:
        if yaml is None:  # pragma: no cover - exercised only without PyYAML
            raise BatchFileNotFound("PyYAML is not installed; cannot load YAML batches")
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("batch_file_invalid", path=path, format="yaml", error=str(exc))
            raise InvalidInputKind(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            return []
        return self._ensure_batch(data, path=path)


_LOADERS = {
    ".json": JSONBatchLoader(),
    ".yaml": YAMLBatchLoader(),
    ".yml": YAMLBatchLoader(),
}


def loader_for(path: str) -> JSONBatchLoader | YAMLBatchLoader:
    """Return the loader registered for the suffix of *path* (JSON by default).

    Examples
    --------
    >>> type(loader_for("books.yml")).__name__
    'YAMLBatchLoader'
    >>> type(loader_for("books.txt")).__name__
    'JSONBatchLoader'
    """

    return _LOADERS.get(Path(path).suffix.lower(), _LOADERS[".json"])  # type: ignore[return-value]
