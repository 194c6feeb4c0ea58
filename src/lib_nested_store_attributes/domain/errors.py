"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the reconciler, the registrar, and
the adapters. The hierarchy lives in the domain layer so outer layers may
depend on it without the domain depending on them.

Contents
--------
* :class:`StoreAttributesError` – umbrella base class for all library errors.
* :class:`InvalidInputKind` – the incoming batch has an unsupported shape.
* :class:`TooManyRecords` – the batch exceeds the configured limit.
* :class:`UnknownOption` – an unrecognised option was passed at registration.
* :class:`NoSuchAttribute` – the attribute is not a field of the entity.
* :class:`BatchFileNotFound` – a batch file requested by the CLI is missing.

System Role
-----------
Reconcile-time errors (:class:`InvalidInputKind`, :class:`TooManyRecords`) are
raised before any value is written back. Registration errors
(:class:`UnknownOption`, :class:`NoSuchAttribute`) prevent an attribute from
ever being configured.
"""

from __future__ import annotations

from typing import Iterable


class StoreAttributesError(Exception):
    """Base type for all exceptions emitted by ``lib_nested_store_attributes``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidInputKind(StoreAttributesError):
    """Raised when a batch is neither a mapping of records nor a sequence of records.

    Examples
    --------
    >>> InvalidInputKind.for_value("oops")
    InvalidInputKind("Hash or Array expected, got str ('oops')")
    """

    @classmethod
    def for_value(cls, value: object) -> InvalidInputKind:
        """Build the error describing the offending *value*."""

        return cls(f"Hash or Array expected, got {type(value).__name__} ({value!r})")


class TooManyRecords(StoreAttributesError):
    """Raised before any mutation when a batch holds more records than allowed.

    Attributes
    ----------
    limit:
        The resolved maximum number of records.
    got:
        The number of records in the normalised batch.

    Examples
    --------
    >>> error = TooManyRecords(1, 2)
    >>> str(error)
    'Maximum 1 records are allowed. Got 2 records instead.'
    >>> (error.limit, error.got)
    (1, 2)
    """

    def __init__(self, limit: int, got: int) -> None:
        super().__init__(f"Maximum {limit} records are allowed. Got {got} records instead.")
        self.limit = limit
        self.got = got


class UnknownOption(StoreAttributesError):
    """Raised at registration time when an option key is not recognised."""

    def __init__(self, options: Iterable[str]) -> None:
        self.options = tuple(sorted(options))
        super().__init__(f"Unknown key(s): {', '.join(self.options)}")


class NoSuchAttribute(StoreAttributesError):
    """Raised when the target attribute is not a known field of the entity."""

    def __init__(self, attribute_name: str) -> None:
        self.attribute_name = attribute_name
        super().__init__(f"No column found for name `{attribute_name}'. Has it been added yet?")


class BatchFileNotFound(StoreAttributesError):
    """Represents a missing batch or collection file passed to the CLI."""
