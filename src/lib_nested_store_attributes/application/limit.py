"""Limit guard evaluated before a batch touches the stored collection."""

from __future__ import annotations

from ..domain.errors import TooManyRecords
from ..domain.options import LimitSpec


def resolve_limit(limit: LimitSpec, owner: object | None = None) -> int | None:
    """Resolve *limit* into an integer (or ``None`` when no limit applies).

    A string names an attribute of *owner*; callables (including bound methods
    looked up that way) are invoked without arguments.

    Examples
    --------
    >>> resolve_limit(3), resolve_limit(None), resolve_limit(lambda: 5)
    (3, None, 5)
    >>> class Shelf:
    ...     def max_books(self):
    ...         return 2
    >>> resolve_limit("max_books", Shelf())
    2
    """

    if limit is None:
        return None
    if isinstance(limit, str):
        if owner is None:
            raise TypeError(f"limit {limit!r} names an attribute but no owning entity was given")
        limit = getattr(owner, limit)
    if callable(limit):
        limit = limit()
    return None if limit is None else int(limit)  # type: ignore[arg-type]


def check_limit(limit: LimitSpec, batch_size: int, owner: object | None = None) -> None:
    """Raise :class:`TooManyRecords` when *batch_size* exceeds the resolved *limit*.

    Examples
    --------
    >>> check_limit(2, 2)
    >>> check_limit(1, 2)
    Traceback (most recent call last):
    ...
    lib_nested_store_attributes.domain.errors.TooManyRecords: Maximum 1 records are allowed. Got 2 records instead.
    """

    resolved = resolve_limit(limit, owner)
    if resolved is not None and batch_size > resolved:
        raise TooManyRecords(resolved, batch_size)
