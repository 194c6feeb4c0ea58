"""Public package surface for reconciling serialized collection attributes.

Exports the registrar (:func:`accepts_store_attributes_for`,
:class:`StoreAttributesRegistry`), the generic write entry point
(:func:`set_collection_attribute`), the pure :func:`reconcile` function, the
error taxonomy, and the logging hooks applications use to observe reconcile
events.
"""

from __future__ import annotations

from .application.reconcile import reconcile
from .core import (
    BatchFileNotFound,
    InvalidInputKind,
    NoSuchAttribute,
    ReconcileOptions,
    StoreAttributesError,
    StoreAttributesRegistry,
    TooManyRecords,
    UnknownOption,
    accepts_store_attributes_for,
    reconcile_collection,
    set_collection_attribute,
    store_attributes,
)
from .domain.options import UNASSIGNABLE_KEYS, reject_all_blank
from .observability import bind_trace_id, get_logger

__all__ = [
    "BatchFileNotFound",
    "InvalidInputKind",
    "NoSuchAttribute",
    "ReconcileOptions",
    "StoreAttributesError",
    "StoreAttributesRegistry",
    "TooManyRecords",
    "UNASSIGNABLE_KEYS",
    "UnknownOption",
    "accepts_store_attributes_for",
    "bind_trace_id",
    "get_logger",
    "reconcile",
    "reconcile_collection",
    "reject_all_blank",
    "set_collection_attribute",
    "store_attributes",
]
