"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode the position of a node in an ordered
result set: its ``(primary, tiebreak)`` order key. The next query seeks
directly past that position.

The cursor format is:
1. Compact JSON object with the ordering signature and the key
2. Sealed with a checksum and URL-safe base64 encoded (see ``relaykit.core.tokens``)

Example cursor payload:
    {"o":"created_at.id.desc","k":[{"$dt":"2025-01-15T10:30:00+00:00"},"abc-123"]}

Values that JSON cannot represent natively (datetime, date, UUID, Decimal)
are tagged so they decode back to the same Python type.

Cursors carry no server-side state: a cursor issued in one request can be
decoded in any later request. They are not stable across changes to the
ordering definition; decoding a cursor minted under another ordering raises
``InvalidCursorError``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from relaykit.core.exceptions import InvalidCursorError
from relaykit.core.pagination.ordering import Ordering, OrderKey
from relaykit.core.tokens import TokenDecodeError, TokenSealer

logger = logging.getLogger(__name__)

_JSON_SCALARS = (str, int, float, bool, type(None))


class CursorPayload(BaseModel):
    """Decoded cursor payload before value tags are resolved.

    Attributes:
        o: Signature of the ordering the cursor was issued for
        k: Serialized ``(primary, tiebreak)`` key
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    o: str = Field(description="Ordering signature")
    k: tuple[Any, Any] = Field(description="Serialized order key")


class CursorCodec:
    """Encode and decode pagination cursors for one ordering.

    Usage:
        codec = CursorCodec(Ordering("created_at", descending=True))

        # Encoding
        cursor = codec.encode(OrderKey(post.created_at, post.id))
        cursor = codec.create_cursor(post)  # same thing

        # Decoding
        key = codec.decode(cursor)
        print(key.primary, key.tiebreak)
    """

    def __init__(self, ordering: Ordering, *, sealer: TokenSealer | None = None) -> None:
        self.ordering = ordering
        self._sealer = sealer or TokenSealer.from_settings()

    def encode(self, key: OrderKey | tuple[Any, Any]) -> str:
        """Encode an order key to an opaque cursor.

        Raises:
            ValueError: If the tiebreak is None.
            TypeError: If a key component has an unsupported type.
        """
        primary, tiebreak = key
        if tiebreak is None:
            raise ValueError("Cursor tiebreak value cannot be None")
        payload = CursorPayload(
            o=self.ordering.signature,
            k=(self._serialize_value(primary), self._serialize_value(tiebreak)),
        )
        json_str = json.dumps(payload.model_dump(), separators=(",", ":"), allow_nan=False)
        return self._sealer.seal(json_str.encode())

    def decode(self, cursor: str) -> OrderKey:
        """Decode a cursor string to its order key.

        Raises:
            InvalidCursorError: If the cursor is malformed, corrupted, or was
                produced under a different ordering.
        """
        try:
            payload = CursorPayload.model_validate_json(self._sealer.unseal(cursor))
        except (TokenDecodeError, ValidationError) as e:
            logger.debug("Rejected cursor %r: %s", cursor, e)
            raise InvalidCursorError(f"Malformed cursor: {e}", cursor=cursor) from e

        if payload.o != self.ordering.signature:
            raise InvalidCursorError(
                "Cursor was issued for a different ordering",
                cursor=cursor,
                extra={"expected": self.ordering.signature, "received": payload.o},
            )

        try:
            primary, tiebreak = (self._deserialize_value(v) for v in payload.k)
        except (TypeError, ValueError, InvalidOperation) as e:
            raise InvalidCursorError(f"Cursor key is malformed: {e}", cursor=cursor) from e
        if tiebreak is None:
            raise InvalidCursorError("Cursor tiebreak value is missing", cursor=cursor)
        return OrderKey(primary, tiebreak)

    def create_cursor(self, node: Any) -> str:
        """Create a cursor for a node (mapping or object)."""
        return self.encode(self.ordering.key_for(node))

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        """Serialize a key component to a JSON-compatible value.

        Handles special types like datetime and UUID by tagging them.
        """
        if isinstance(value, datetime):
            return {"$dt": value.isoformat()}
        if isinstance(value, date):
            return {"$d": value.isoformat()}
        if isinstance(value, UUID):
            return {"$uuid": str(value)}
        if isinstance(value, Decimal):
            return {"$dec": str(value)}
        if isinstance(value, _JSON_SCALARS):
            return value
        raise TypeError(f"Unsupported cursor value type: {type(value).__name__}")

    @staticmethod
    def _deserialize_value(value: Any) -> Any:
        if isinstance(value, dict):
            if len(value) != 1:
                raise ValueError("tagged value must have exactly one tag")
            (tag, raw), = value.items()
            if not isinstance(raw, str):
                raise TypeError("tagged value must be a string")
            if tag == "$dt":
                return datetime.fromisoformat(raw)
            if tag == "$d":
                return date.fromisoformat(raw)
            if tag == "$uuid":
                return UUID(raw)
            if tag == "$dec":
                return Decimal(raw)
            raise ValueError(f"unknown value tag {tag!r}")
        if isinstance(value, _JSON_SCALARS):
            return value
        raise TypeError(f"unsupported cursor value {value!r}")


__all__ = ["CursorCodec", "CursorPayload"]
