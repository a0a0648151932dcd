"""Opaque token envelope shared by global identifiers and cursors.

A token is the URL-safe base64 encoding (padding stripped) of a payload
followed by a short BLAKE2b checksum:

    token = b64url(payload || blake2b(payload, key=signing_key)[:4])

The alphabet ``[A-Za-z0-9_-]`` is safe inside URLs and JSON strings. The
checksum catches truncated or hand-edited tokens that would otherwise decode
to a structurally valid but wrong payload.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import re

CHECKSUM_SIZE = 4

_ALPHABET = re.compile(r"[A-Za-z0-9_-]+")


class TokenDecodeError(ValueError):
    """Raised when a token cannot be unsealed.

    Codecs translate this into their own typed API error.
    """


class TokenSealer:
    """Seal and unseal opaque token payloads.

    Args:
        key: Optional key for the checksum digest.
        checksum: Append and verify a checksum (disable only for debugging).

    Example:
        sealer = TokenSealer(key=b"secret")
        token = sealer.seal(b"User:42")
        assert sealer.unseal(token) == b"User:42"
    """

    __slots__ = ("_checksum", "_key")

    def __init__(self, key: bytes = b"", *, checksum: bool = True) -> None:
        if len(key) > hashlib.blake2b.MAX_KEY_SIZE:
            key = hashlib.blake2b(key).digest()
        self._key = key
        self._checksum = checksum

    @classmethod
    def from_settings(cls) -> TokenSealer:
        from relaykit.core.settings import get_identity_settings

        settings = get_identity_settings()
        return cls(settings.key_bytes, checksum=settings.checksum_enabled)

    def _digest(self, payload: bytes) -> bytes:
        return hashlib.blake2b(payload, key=self._key, digest_size=CHECKSUM_SIZE).digest()

    def seal(self, payload: bytes) -> str:
        raw = payload + self._digest(payload) if self._checksum else payload
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    def unseal(self, token: str) -> bytes:
        if not isinstance(token, str) or not token:
            raise TokenDecodeError("token must be a non-empty string")
        if not _ALPHABET.fullmatch(token):
            raise TokenDecodeError("token contains characters outside the URL-safe alphabet")
        if len(token) % 4 == 1:
            raise TokenDecodeError("token has an impossible length")

        padded = token + "=" * (-len(token) % 4)
        try:
            raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        except binascii.Error as e:
            raise TokenDecodeError(f"token is not valid base64: {e}") from e

        if not self._checksum:
            return raw

        if len(raw) <= CHECKSUM_SIZE:
            raise TokenDecodeError("token is too short")
        payload, digest = raw[:-CHECKSUM_SIZE], raw[-CHECKSUM_SIZE:]
        if not hmac.compare_digest(digest, self._digest(payload)):
            raise TokenDecodeError("token checksum mismatch")
        return payload


__all__ = ["CHECKSUM_SIZE", "TokenDecodeError", "TokenSealer"]
