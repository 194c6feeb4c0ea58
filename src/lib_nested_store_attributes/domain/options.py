"""Domain-level reconcile options and record predicates.

Purpose
-------
Anchor the immutable :class:`ReconcileOptions` value object that configures how
one collection attribute is reconciled, together with the small predicates the
matcher relies on (destroy flag coercion, blankness, the ``all_blank`` reject
rule). The module contains no I/O.

Contents
--------
* :data:`UNASSIGNABLE_KEYS` – metadata fields stripped before a record is stored.
* :data:`VALID_OPTIONS` – the option names accepted at registration time.
* :class:`ReconcileOptions` – per-attribute configuration.
* :func:`value_to_boolean` – boolean coercion used for ``_destroy``.
* :func:`is_blank` / :func:`is_present` – blankness checks.
* :func:`reject_all_blank` – predicate behind the reserved ``"all_blank"`` keyword.
"""

from __future__ import annotations

from collections.abc import Mapping, Sized
from dataclasses import dataclass
from typing import Any, Callable, Final, Union

from .errors import UnknownOption

RejectPredicate = Callable[[Mapping[str, Any]], bool]
LimitSpec = Union[int, str, Callable[[], int], None]

DESTROY_KEY: Final[str] = "_destroy"
UNASSIGNABLE_KEYS: Final[frozenset[str]] = frozenset({"id", DESTROY_KEY})
"""Fields that drive reconciliation and are never written into a stored record."""

ALL_BLANK: Final[str] = "all_blank"
VALID_OPTIONS: Final[frozenset[str]] = frozenset(
    {"allow_destroy", "reject_if", "limit", "update_only", "primary_key"}
)

_TRUE_VALUES: Final[frozenset[object]] = frozenset({True, 1, "1", "t", "T", "true", "TRUE", "on", "ON"})


def value_to_boolean(value: object) -> bool:
    """Coerce a boolean-like literal the way form columns do.

    Examples
    --------
    >>> [value_to_boolean(v) for v in (True, 1, "1", "true", "on")]
    [True, True, True, True, True]
    >>> [value_to_boolean(v) for v in (False, 0, "0", "false", None, "yes", [])]
    [False, False, False, False, False, False, False]
    """

    if not isinstance(value, (bool, int, float, str)):
        return False
    return value in _TRUE_VALUES


def is_blank(value: object) -> bool:
    """Return ``True`` for ``None``, ``False``, whitespace-only strings and empty containers.

    Examples
    --------
    >>> [is_blank(v) for v in (None, False, "", "  ", [], {})]
    [True, True, True, True, True, True]
    >>> [is_blank(v) for v in (0, "x", [None], True)]
    [False, False, False, False]
    """

    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def is_present(value: object) -> bool:
    """Inverse of :func:`is_blank`."""

    return not is_blank(value)


def has_destroy_flag(record: Mapping[str, Any]) -> bool:
    """Return whether *record* carries a truthy ``_destroy`` field."""

    return value_to_boolean(record.get(DESTROY_KEY))


def reject_all_blank(record: Mapping[str, Any]) -> bool:
    """Reject records whose fields are all blank, ignoring ``_destroy``.

    Examples
    --------
    >>> reject_all_blank({"name": "", "_destroy": "1"})
    True
    >>> reject_all_blank({"name": "war and peace"})
    False
    """

    return all(key == DESTROY_KEY or is_blank(value) for key, value in record.items())


@dataclass(frozen=True, slots=True)
class ReconcileOptions:
    """Immutable configuration for one collection attribute.

    Attributes
    ----------
    allow_destroy:
        Drop matched records whose incoming attributes carry a truthy
        ``_destroy`` flag.
    reject_if:
        Predicate deciding whether an incoming record is discarded.
    limit:
        Maximum batch size: an ``int``, a zero-argument callable, or the name
        of an attribute on the owning entity.
    update_only:
        Accepted for compatibility; the reconciler does not consult it.
    primary_key:
        Field used to match incoming records against stored ones.

    Examples
    --------
    >>> opts = ReconcileOptions.from_mapping({"primary_key": "isbn", "allow_destroy": True})
    >>> (opts.primary_key, opts.allow_destroy, opts.reject_if)
    ('isbn', True, None)
    >>> ReconcileOptions.from_mapping({"reject_if": "all_blank"}).reject_if is reject_all_blank
    True
    """

    allow_destroy: bool = False
    reject_if: RejectPredicate | None = None
    limit: LimitSpec = None
    update_only: bool = False
    primary_key: str = "id"

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> ReconcileOptions:
        """Validate raw keyword *options* and build the value object.

        Raises
        ------
        UnknownOption
            When *options* contains keys outside :data:`VALID_OPTIONS`.
        TypeError
            When ``reject_if`` is neither callable nor the ``"all_blank"`` keyword.
        """

        unknown = set(options) - VALID_OPTIONS
        if unknown:
            raise UnknownOption(unknown)
        values = dict(options)
        values["reject_if"] = _resolve_reject_if(values.get("reject_if"))
        if "primary_key" in values:
            values["primary_key"] = str(values["primary_key"])
        return cls(**values)

    def should_reject(self, record: Mapping[str, Any]) -> bool:
        """Evaluate the reject predicate; destroy-flagged records are never rejected."""

        if has_destroy_flag(record) or self.reject_if is None:
            return False
        return bool(self.reject_if(record))


def _resolve_reject_if(reject_if: object) -> RejectPredicate | None:
    """Translate the reserved ``"all_blank"`` keyword into its predicate."""

    if reject_if is None:
        return None
    if reject_if == ALL_BLANK:
        return reject_all_blank
    if not callable(reject_if):
        raise TypeError(f"reject_if must be callable or {ALL_BLANK!r}, got {reject_if!r}")
    return reject_if  # type: ignore[return-value]
