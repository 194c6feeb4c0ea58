"""Default entity accessors.

Purpose
-------
Implement :class:`lib_nested_store_attributes.application.ports.CollectionAccessor`
for the entity shapes Python applications commonly use: plain objects and
dataclasses, dictionaries, and either of those holding the collection as
serialized text.

Contents
--------
* :class:`AttributeAccessor` – ``getattr``/``setattr`` on objects.
* :class:`MappingAccessor` – item access on dict-like entities.
* :class:`SerializedAccessor` – decorates another accessor with a codec.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import MutableMapping
from typing import Any, Iterable

from ...application.ports import CollectionAccessor, CollectionCodec
from ..codecs.json_codec import JSONCodec


class AttributeAccessor:
    """Access collection attributes stored as instance attributes.

    Field names come from dataclass fields when available, otherwise from the
    class annotations and ``__slots__`` along the MRO.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Person:
    ...     name: str = ""
    ...     books: list = field(default_factory=list)
    >>> sorted(AttributeAccessor().field_names(Person))
    ['books', 'name']
    """

    def field_names(self, entity_type: type) -> Iterable[str]:
        if dataclasses.is_dataclass(entity_type):
            return [item.name for item in dataclasses.fields(entity_type)]
        names: list[str] = []
        for klass in reversed(entity_type.__mro__):
            names.extend(inspect.get_annotations(klass))
            slots = vars(klass).get("__slots__", ())
            names.extend([slots] if isinstance(slots, str) else slots)
        return list(dict.fromkeys(names))

    def read(self, entity: Any, name: str) -> Any:
        return getattr(entity, name, None)

    def write(self, entity: Any, name: str, value: list[dict[str, Any]]) -> None:
        setattr(entity, name, value)


class MappingAccessor:
    """Access collection attributes stored under keys of a mutable mapping.

    Parameters
    ----------
    fields:
        The keys an entity is allowed to carry (the "columns").
    """

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)

    def field_names(self, entity_type: type) -> Iterable[str]:
        return self.fields

    def read(self, entity: MutableMapping[str, Any], name: str) -> Any:
        return entity.get(name)

    def write(self, entity: MutableMapping[str, Any], name: str, value: list[dict[str, Any]]) -> None:
        entity[name] = value


class SerializedAccessor:
    """Store the collection as serialized text through an inner accessor.

    Examples
    --------
    >>> accessor = SerializedAccessor(MappingAccessor(["books"]))
    >>> row = {"books": '[{"isbn":1}]'}
    >>> accessor.read(row, "books")
    [{'isbn': 1}]
    >>> accessor.write(row, "books", [])
    >>> row["books"]
    '[]'
    """

    def __init__(self, inner: CollectionAccessor | None = None, codec: CollectionCodec | None = None) -> None:
        self.inner = inner if inner is not None else AttributeAccessor()
        self.codec = codec if codec is not None else JSONCodec()

    def field_names(self, entity_type: type) -> Iterable[str]:
        return self.inner.field_names(entity_type)

    def read(self, entity: Any, name: str) -> Any:
        stored = self.inner.read(entity, name)
        if stored is None or isinstance(stored, (str, bytes)):
            return self.codec.loads(stored)
        return stored

    def write(self, entity: Any, name: str, value: list[dict[str, Any]]) -> None:
        self.inner.write(entity, name, self.codec.dumps(value))
