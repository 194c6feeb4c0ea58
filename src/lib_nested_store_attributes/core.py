"""Composition root for ``lib_nested_store_attributes``.

Purpose
-------
Wire the pure reconciler to owning entities. Instead of generating one writer
method per configured attribute, a :class:`StoreAttributesRegistry` maps
attribute names to :class:`ReconcileOptions` and a single generic entry point,
:func:`set_collection_attribute`, dispatches through it.

Contents
--------
* :class:`StoreAttributesRegistry` – explicit configuration map plus ``assign``.
* :func:`accepts_store_attributes_for` – attach options to an entity class.
* :func:`store_attributes` – class decorator flavour of the above.
* :func:`set_collection_attribute` – reconcile a raw batch into an entity field.
* :func:`reconcile_collection` – one-shot helper for callers without entities.

System Role
-----------
This module connects accessors (how entity fields are read and written) with
the reconcile policy while emitting structured observability signals. The only
side effect it triggers is one field assignment per call.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from .adapters.entity.default import AttributeAccessor
from .application.ports import CollectionAccessor
from .application.reconcile import reconcile
from .domain.errors import (
    BatchFileNotFound,
    InvalidInputKind,
    NoSuchAttribute,
    StoreAttributesError,
    TooManyRecords,
    UnknownOption,
)
from .domain.options import ReconcileOptions
from .observability import log_debug, log_info, make_event

REGISTRY_ATTRIBUTE = "store_attributes_registry"


class StoreAttributesRegistry:
    """Map collection attribute names to their reconcile options.

    Why
    ----
    Keeps configuration explicit and inspectable: one registry per entity
    type, one options object per attribute, one generic assignment path.

    Parameters
    ----------
    field_names:
        Attributes the owning entity knows about; only these may be registered.
    accessor:
        Collaborator used by :meth:`assign` to read and write the field.
        Defaults to :class:`AttributeAccessor`.

    Examples
    --------
    >>> registry = StoreAttributesRegistry(["books", "cars"])
    >>> _ = registry.register("books", primary_key="isbn", allow_destroy=True)
    >>> registry.options_for("books").primary_key
    'isbn'
    >>> "cars" in registry
    False
    """

    def __init__(self, field_names: Iterable[str], accessor: CollectionAccessor | None = None) -> None:
        self.field_names = frozenset(field_names)
        self.accessor = accessor if accessor is not None else AttributeAccessor()
        self._options: dict[str, ReconcileOptions] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(self._options)

    def register(self, *attribute_names: str, **options: Any) -> StoreAttributesRegistry:
        """Configure *attribute_names* with *options*; re-registering replaces them.

        Raises
        ------
        UnknownOption
            When an option key is not recognised.
        NoSuchAttribute
            When a name is not one of :attr:`field_names`. Nothing is registered
            in that case, not even the valid names preceding it.
        """

        parsed = ReconcileOptions.from_mapping(options)
        names = [str(name) for name in attribute_names]
        for name in names:
            if name not in self.field_names:
                raise NoSuchAttribute(name)
        for name in names:
            self._options[name] = parsed
            log_debug("attribute_registered", **make_event(name, parsed.primary_key))
        return self

    def options_for(self, name: str) -> ReconcileOptions:
        """Return the options registered for *name* or raise :class:`NoSuchAttribute`."""

        try:
            return self._options[name]
        except KeyError as exc:
            raise NoSuchAttribute(name) from exc

    def assign(self, entity: Any, name: str, raw: object) -> list[dict[str, Any]]:
        """Reconcile *raw* into the collection stored under *name* on *entity*.

        Reads the current value once, computes the new collection in memory,
        and writes it back with a single assignment. When reconciliation
        raises, nothing is written.
        """

        options = self.options_for(name)
        current = self.accessor.read(entity, name)
        collection = reconcile(current, raw, options, owner=entity, attribute=name)
        self.accessor.write(entity, name, collection)
        log_info("collection_assigned", **make_event(name, options.primary_key, {"records": len(collection)}))
        return collection

    def copy(self) -> StoreAttributesRegistry:
        clone = StoreAttributesRegistry(self.field_names, self.accessor)
        clone._options = dict(self._options)
        return clone


def accepts_store_attributes_for(
    entity_type: type,
    *attribute_names: str,
    accessor: CollectionAccessor | None = None,
    **options: Any,
) -> StoreAttributesRegistry:
    """Configure collection attributes on *entity_type* and return its registry.

    The registry is copied before being changed, so configuring a subclass
    never leaks options into its parent class.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Person:
    ...     books: list = field(default_factory=list)
    >>> registry = accepts_store_attributes_for(Person, "books", primary_key="isbn")
    >>> person = Person()
    >>> set_collection_attribute(person, "books", {"1": {"isbn": 1, "name": "dune"}})
    [{'isbn': 1, 'name': 'dune'}]
    >>> person.books
    [{'isbn': 1, 'name': 'dune'}]
    """

    current: StoreAttributesRegistry | None = getattr(entity_type, REGISTRY_ATTRIBUTE, None)
    if current is None:
        resolved_accessor = accessor if accessor is not None else AttributeAccessor()
        registry = StoreAttributesRegistry(resolved_accessor.field_names(entity_type), resolved_accessor)
    else:
        registry = current.copy()
        if accessor is not None:
            registry.accessor = accessor
        registry.field_names = frozenset(registry.accessor.field_names(entity_type))
    registry.register(*attribute_names, **options)
    setattr(entity_type, REGISTRY_ATTRIBUTE, registry)
    return registry


def store_attributes(*attribute_names: str, accessor: CollectionAccessor | None = None, **options: Any):
    """Class decorator flavour of :func:`accepts_store_attributes_for`.

    Apply it above ``@dataclass`` so the field list is already known.
    """

    def decorate(entity_type: type) -> type:
        accepts_store_attributes_for(entity_type, *attribute_names, accessor=accessor, **options)
        return entity_type

    return decorate


def set_collection_attribute(entity: Any, name: str, raw: object) -> list[dict[str, Any]]:
    """Reconcile *raw* into the configured collection attribute *name* of *entity*.

    Raises
    ------
    NoSuchAttribute
        When *name* was never configured for the entity's class.
    InvalidInputKind / TooManyRecords
        Propagated from the reconciler; the entity is left untouched.
    """

    registry: StoreAttributesRegistry | None = getattr(type(entity), REGISTRY_ATTRIBUTE, None)
    if registry is None:
        raise NoSuchAttribute(name)
    return registry.assign(entity, name, raw)


def reconcile_collection(existing: object, raw: object, **options: Any) -> list[dict[str, Any]]:
    """Validate *options* and reconcile *raw* against *existing* in one call.

    Examples
    --------
    >>> reconcile_collection([{"id": 1, "name": "test"}], [{"id": 1, "_destroy": True}])
    [{'id': 1, 'name': 'test'}]
    """

    return reconcile(existing, raw, ReconcileOptions.from_mapping(options))


__all__ = [
    "BatchFileNotFound",
    "InvalidInputKind",
    "NoSuchAttribute",
    "ReconcileOptions",
    "StoreAttributesError",
    "StoreAttributesRegistry",
    "TooManyRecords",
    "UnknownOption",
    "accepts_store_attributes_for",
    "reconcile_collection",
    "set_collection_attribute",
    "store_attributes",
]
