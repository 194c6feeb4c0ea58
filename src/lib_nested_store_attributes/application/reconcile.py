"""Application-layer reconcile policy.

Purpose
-------
Compute the new value of a collection attribute from the stored records and an
incoming batch of attribute maps, with create/update/destroy semantics keyed on
a configurable primary key. The module is free of I/O: it receives plain data
and returns a freshly built list.

Contents
    - ``reconcile``: public entry point driven by a single pass over the batch.
    - ``ReconcileSummary``: per-call counters emitted through the logger.
    - ``_apply_record`` / ``_update_or_destroy`` / ``_build_new``: small
      stanzas narrating what happens to one incoming record.
    - ``_take_match``: removes the first stored record whose key matches.

System Role
-----------
Called by :class:`lib_nested_store_attributes.core.StoreAttributesRegistry`
(and the CLI) with the value read from the owning entity; the caller writes the
returned list back as one field assignment.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from ..domain.errors import TooManyRecords
from ..domain.options import UNASSIGNABLE_KEYS, ReconcileOptions, has_destroy_flag, is_present
from ..observability import log_debug, log_info, make_event
from .limit import check_limit
from .normalize import normalize_batch, normalize_collection


@dataclass(slots=True)
class ReconcileSummary:
    """Count what happened to the records during one reconcile call."""

    created: int = 0
    updated: int = 0
    destroyed: int = 0
    rejected: int = 0
    retained: int = 0

    def as_event(self) -> dict[str, int]:
        return asdict(self)


def reconcile(
    existing: object,
    raw: object,
    options: ReconcileOptions | None = None,
    *,
    owner: object | None = None,
    attribute: str | None = None,
) -> list[dict[str, Any]]:
    """Return the collection that results from applying *raw* to *existing*.

    Why
    ----
    Nested-form style editing of a serialized list: callers send the records
    they touched and the reconciler works out which stored records are
    updated, created, destroyed, or left alone.

    What
    ----
    Normalises the batch, enforces the limit, then walks the batch once.
    Records with a present primary key that matches a stored record update it
    (or drop it when destruction is allowed and ``_destroy`` is truthy).
    Everything else is a new record unless rejected. Stored records nobody
    referenced follow the processed ones in their original order.

    Parameters
    ----------
    existing:
        Current stored collection (``None`` is treated as empty). Never mutated.
    raw:
        Incoming batch: mapping of records, single record mapping, or sequence.
    options:
        Per-attribute configuration; defaults to :class:`ReconcileOptions`.
    owner:
        Entity used to resolve a named ``limit``.
    attribute:
        Attribute name, only used to label log events.

    Raises
    ------
    InvalidInputKind
        When *raw* (or *existing*) has an unsupported shape.
    TooManyRecords
        When the batch exceeds the resolved limit.

    Examples
    --------
    >>> books = [{"isbn": 1234, "name": "war, what is it good for"}, {"isbn": 5678, "name": "the borg"}]
    >>> reconcile(books, [{"isbn": 1234, "name": "war and peace"}], ReconcileOptions(primary_key="isbn"))
    [{'isbn': 1234, 'name': 'war and peace'}, {'isbn': 5678, 'name': 'the borg'}]
    >>> books[0]["name"]
    'war, what is it good for'
    """

    options = options or ReconcileOptions()
    primary_key = options.primary_key
    batch = normalize_batch(raw, primary_key)
    log_debug("batch_normalized", **make_event(attribute, primary_key, {"records": len(batch)}))
    try:
        check_limit(options.limit, len(batch), owner)
    except TooManyRecords as exc:
        log_debug("limit_exceeded", **make_event(attribute, primary_key, {"limit": exc.limit, "got": exc.got}))
        raise

    pool = normalize_collection(existing)
    summary = ReconcileSummary()
    collection: list[dict[str, Any] | None] = []
    for attributes in batch:
        collection.append(_apply_record(pool, attributes, options, summary))

    summary.retained = len(pool)
    collection.extend(pool)
    result = [record for record in collection if record is not None]
    log_info("collection_reconciled", **make_event(attribute, primary_key, summary.as_event()))
    return result


def _apply_record(
    pool: list[dict[str, Any]],
    attributes: dict[str, Any],
    options: ReconcileOptions,
    summary: ReconcileSummary,
) -> dict[str, Any] | None:
    """Route one incoming record to the update or the create branch."""

    key_value = attributes.get(options.primary_key)
    if is_present(key_value):
        matched = _take_match(pool, options.primary_key, key_value)
        if matched is not None:
            return _update_or_destroy(matched, attributes, options, summary)
    return _build_new(attributes, options, summary)


def _update_or_destroy(
    record: dict[str, Any],
    attributes: dict[str, Any],
    options: ReconcileOptions,
    summary: ReconcileSummary,
) -> dict[str, Any] | None:
    """Merge *attributes* onto the matched *record*, or drop it.

    A rejected update drops the matched record as well: matching consumed it
    from the pool.
    """

    if options.should_reject(attributes):
        summary.rejected += 1
        return None
    record.update(_assignable(attributes))
    if options.allow_destroy and has_destroy_flag(attributes):
        summary.destroyed += 1
        return None
    summary.updated += 1
    return record


def _build_new(
    attributes: dict[str, Any],
    options: ReconcileOptions,
    summary: ReconcileSummary,
) -> dict[str, Any] | None:
    """Return the record to append for an unmatched entry, or ``None`` when rejected."""

    if has_destroy_flag(attributes) or options.should_reject(attributes):
        summary.rejected += 1
        return None
    summary.created += 1
    return _assignable(attributes)


def _take_match(pool: list[dict[str, Any]], primary_key: str, key_value: object) -> dict[str, Any] | None:
    """Pop and return the first pooled record whose key matches *key_value*."""

    wanted = _key_string(key_value)
    for index, record in enumerate(pool):
        if _key_string(record.get(primary_key)) == wanted:
            return pool.pop(index)
    return None


def _key_string(value: object) -> str:
    """Stringify a primary-key value for comparison (``1234`` matches ``"1234"``).

    Examples
    --------
    >>> _key_string(1234), _key_string(None), _key_string(True)
    ('1234', '', 'true')
    """

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _assignable(attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Drop reconciliation metadata so only domain data is stored."""

    return {key: value for key, value in attributes.items() if key not in UNASSIGNABLE_KEYS}
