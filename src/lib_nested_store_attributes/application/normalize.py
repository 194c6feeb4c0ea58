"""Input normalisation for incoming batches and stored collections.

Purpose
-------
Turn whatever the caller hands over (a mapping of records keyed by index, a
single record, or a sequence of records) into one ordered list of string-keyed
dictionaries. Key normalisation happens once, here, so the matcher never has
to care whether a caller used ``"name"`` or some other key representation.

Contents
    - ``normalize_batch``: public entry point applying the mapping/sequence policy.
    - ``normalize_collection``: normalises the stored collection read back from an entity.
    - ``stringify_keys``: deep key normalisation for a single record.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from ..domain.errors import InvalidInputKind


def normalize_batch(raw: object, primary_key: str = "id") -> list[dict[str, Any]]:
    """Return the incoming *raw* batch as an ordered list of records.

    A mapping that carries *primary_key* among its top-level keys is a single
    record and gets wrapped. Any other mapping is an index-keyed batch: its
    keys are discarded and its values kept in iteration order. Sequences pass
    through.

    Raises
    ------
    InvalidInputKind
        When *raw* is neither a mapping nor a sequence, or when one of the
        records is not a mapping.

    Examples
    --------
    >>> normalize_batch({"1": {"isbn": 1}, "2": {"name": "x"}}, "isbn")
    [{'isbn': 1}, {'name': 'x'}]
    >>> normalize_batch({"isbn": 1, "name": "x"}, "isbn")
    [{'isbn': 1, 'name': 'x'}]
    >>> normalize_batch("not a batch")
    Traceback (most recent call last):
    ...
    lib_nested_store_attributes.domain.errors.InvalidInputKind: Hash or Array expected, got str ('not a batch')
    """

    if isinstance(raw, Mapping):
        keys = {_key_to_str(key) for key in raw}
        records: Sequence[object] = [raw] if primary_key in keys else list(raw.values())
    elif _is_record_sequence(raw):
        records = raw  # type: ignore[assignment]
    else:
        raise InvalidInputKind.for_value(raw)
    return [_ensure_record(record) for record in records]


def normalize_collection(stored: object) -> list[dict[str, Any]]:
    """Normalise the stored collection; ``None`` means no records yet."""

    if stored is None:
        return []
    if not _is_record_sequence(stored):
        raise InvalidInputKind.for_value(stored)
    return [_ensure_record(record) for record in stored]  # type: ignore[union-attr]


def stringify_keys(record: Mapping[Any, Any]) -> dict[str, Any]:
    """Return a deep copy of *record* whose mapping keys are all strings.

    Examples
    --------
    >>> stringify_keys({1: {"nested": [{2: "x"}]}})
    {'1': {'nested': [{'2': 'x'}]}}
    """

    return {_key_to_str(key): _stringify_value(value) for key, value in record.items()}


def _stringify_value(value: Any) -> Any:
    """Recurse into nested mappings, lists and tuples so no raw key type survives."""

    if isinstance(value, Mapping):
        return stringify_keys(value)
    if isinstance(value, list):
        return [_stringify_value(item) for item in value]
    if isinstance(value, tuple):
        items = [_stringify_value(item) for item in value]
        return type(value)(*items) if hasattr(value, "_fields") else type(value)(items)
    return value


def _key_to_str(key: object) -> str:
    """Map a key to its string form; string-valued enums use their value."""

    if isinstance(key, Enum) and isinstance(key.value, str):
        return key.value
    return key if type(key) is str else str(key)


def _is_record_sequence(value: object) -> bool:
    """Sequences qualify as batches, text and bytes do not."""

    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _ensure_record(record: object) -> dict[str, Any]:
    """Normalise one record or reject the whole batch when it is not a mapping."""

    if not isinstance(record, Mapping):
        raise InvalidInputKind.for_value(record)
    return stringify_keys(record)
