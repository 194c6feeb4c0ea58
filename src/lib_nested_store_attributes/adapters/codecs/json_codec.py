"""JSON codec for collections stored in a single text column.

Purpose
-------
Mirror the ``serialize :books, JSON`` column of classic nested-attribute
setups: the whole collection lives in one string field and is decoded before
reconciliation and encoded afterwards.
"""

from __future__ import annotations

import json
from typing import Any

from ...domain.errors import InvalidInputKind
from ...observability import log_debug


class JSONCodec:
    """Encode collections as compact JSON text.

    Examples
    --------
    >>> codec = JSONCodec()
    >>> codec.dumps([{"isbn": 1234, "name": "war and peace"}])
    '[{"isbn":1234,"name":"war and peace"}]'
    >>> codec.loads('[{"isbn":1234}]')
    [{'isbn': 1234}]
    >>> codec.loads('')
    []
    """

    def __init__(self, *, indent: int | None = None) -> None:
        self.indent = indent

    def dumps(self, collection: list[dict[str, Any]]) -> str:
        return json.dumps(collection, indent=self.indent, separators=(",", ":"), ensure_ascii=False)

    def loads(self, text: str | bytes | None) -> Any:
        """Decode *text*; ``None`` and blank text read as an empty collection."""

        if text is None:
            return []
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        if not text.strip():
            return []
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            log_debug("collection_decode_error", codec="json", error=str(exc))
            raise InvalidInputKind(f"Stored collection is not valid JSON: {exc}") from exc
