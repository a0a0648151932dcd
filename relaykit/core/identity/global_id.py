"""Global object identifier encoding and decoding.

A global identifier names an entity across the whole API by combining its
type name and its store-local id:

    "User", "42"  ->  "VXNlcjo0..."  (opaque, URL/JSON safe)

Only the first ``:`` separates the type name from the local id, so local ids
may themselves contain ``:`` and still round-trip. The encoded string carries
no ordering; uniqueness comes from ``(type_name, local_id)`` uniqueness in the
store. Global ids are minted at the API boundary and never persisted; the store
keeps the raw local id.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from relaykit.core.exceptions import InvalidIdentifierError
from relaykit.core.tokens import TokenDecodeError, TokenSealer

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DELIMITER = ":"


class GlobalId(NamedTuple):
    """Decoded global identifier."""

    type_name: str
    local_id: str

    def __str__(self) -> str:
        return f"{self.type_name}{DELIMITER}{self.local_id}"


class GlobalIdCodec:
    """Encode and decode opaque global identifiers for a set of known types.

    Usage:
        codec = GlobalIdCodec(["User", "Post"])

        token = codec.encode("User", "42")
        codec.decode(token)                  # GlobalId(type_name="User", local_id="42")
        codec.decode_for(token, "User")      # "42"
        codec.decode_for(token, "Post")      # raises InvalidIdentifierError

    Args:
        known_types: Type names this codec accepts on both encode and decode.
        sealer: Token envelope; defaults to one built from IdentitySettings.
    """

    def __init__(
        self,
        known_types: Iterable[str],
        *,
        sealer: TokenSealer | None = None,
    ) -> None:
        types = frozenset(known_types)
        for type_name in types:
            self._check_type_name(type_name)
        self.known_types = types
        self._sealer = sealer or TokenSealer.from_settings()

    @staticmethod
    def _check_type_name(type_name: str) -> None:
        if not isinstance(type_name, str) or not type_name:
            raise InvalidIdentifierError("Type name must be a non-empty string")
        if DELIMITER in type_name:
            raise InvalidIdentifierError(
                f"Type name '{type_name}' contains the reserved delimiter '{DELIMITER}'"
            )

    def encode(self, type_name: str, local_id: str) -> str:
        """Encode a ``(type_name, local_id)`` pair into an opaque identifier.

        Raises:
            InvalidIdentifierError: If the type name is empty, contains the
                delimiter, or is unknown, or if the local id is empty.
        """
        self._check_type_name(type_name)
        if type_name not in self.known_types:
            raise InvalidIdentifierError(f"Unknown type '{type_name}'")
        if not isinstance(local_id, str) or not local_id:
            raise InvalidIdentifierError("Local id must be a non-empty string")
        return self._sealer.seal(f"{type_name}{DELIMITER}{local_id}".encode())

    def decode(self, token: str) -> GlobalId:
        """Decode an opaque identifier.

        Raises:
            InvalidIdentifierError: On alphabet or checksum violations, a
                missing delimiter, an empty part, or an unknown type name.
        """
        try:
            text = self._sealer.unseal(token).decode("utf-8")
        except TokenDecodeError as e:
            logger.debug("Rejected global id %r: %s", token, e)
            raise InvalidIdentifierError(f"Malformed identifier: {e}", token=token) from e
        except UnicodeDecodeError as e:
            raise InvalidIdentifierError("Identifier payload is not UTF-8", token=token) from e

        type_name, sep, local_id = text.partition(DELIMITER)
        if not sep:
            raise InvalidIdentifierError("Identifier is missing the type delimiter", token=token)
        if not type_name or not local_id:
            raise InvalidIdentifierError("Identifier has an empty component", token=token)
        if type_name not in self.known_types:
            raise InvalidIdentifierError(f"Unknown type '{type_name}'", token=token)
        return GlobalId(type_name, local_id)

    def decode_for(self, token: str, expected_type: str) -> str:
        """Decode an identifier that must belong to ``expected_type``.

        Returns:
            The local id.
        """
        global_id = self.decode(token)
        if global_id.type_name != expected_type:
            raise InvalidIdentifierError(
                f"Expected a {expected_type} identifier, got {global_id.type_name}",
                token=token,
            )
        return global_id.local_id

    def is_valid(self, token: str) -> bool:
        try:
            self.decode(token)
        except InvalidIdentifierError:
            return False
        return True


__all__ = ["DELIMITER", "GlobalId", "GlobalIdCodec"]
