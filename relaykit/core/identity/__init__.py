"""Opaque global object identifiers."""

from relaykit.core.identity.global_id import DELIMITER, GlobalId, GlobalIdCodec

__all__ = ["DELIMITER", "GlobalId", "GlobalIdCodec"]
