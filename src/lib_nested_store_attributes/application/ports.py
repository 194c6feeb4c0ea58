"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the registrar relies on so it can read and
write collection attributes without depending on a concrete entity model or
storage format.

Contents
--------
* :class:`CollectionAccessor` – lists an entity type's fields and reads/writes one.
* :class:`CollectionCodec` – turns a collection into stored text and back.

System Role
-----------
These protocols keep :mod:`lib_nested_store_attributes.core` agnostic of how
entities are modelled. Each adapter implements one protocol.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class CollectionAccessor(Protocol):
    """Read and write collection attributes on an owning entity.

    Why
    ----
    The reconciler is pure; something has to supply the current value and
    store the new one. Accessors are that boundary.
    """

    def field_names(self, entity_type: type) -> Iterable[str]:
        """Return the attribute names known for *entity_type*."""

    def read(self, entity: Any, name: str) -> Any:
        """Return the current value of *name* on *entity*."""

    def write(self, entity: Any, name: str, value: list[dict[str, Any]]) -> None:
        """Store *value* as the new value of *name* on *entity*."""


@runtime_checkable
class CollectionCodec(Protocol):
    """Serialize a collection into the text stored in a single column."""

    def dumps(self, collection: list[dict[str, Any]]) -> str:
        """Return the stored text for *collection*."""

    def loads(self, text: str) -> Any:
        """Return the collection decoded from *text*."""
