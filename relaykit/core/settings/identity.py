"""Opaque token settings shared by global identifiers and cursors.

Environment variables use IDENTITY_ prefix.
Example: IDENTITY_CHECKSUM_ENABLED=true, IDENTITY_SIGNING_KEY=change-me
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentitySettings(BaseSettings):
    """Checksum configuration for opaque identifiers and cursors.

    With a signing key the checksum becomes a keyed digest, so tokens minted
    by one deployment are rejected by another.
    """

    checksum_enabled: bool = Field(
        default=True,
        description="Append and verify a checksum on every opaque token",
    )
    signing_key: SecretStr | None = Field(
        default=None,
        description="Optional key for the token checksum digest",
    )

    model_config = SettingsConfigDict(
        env_prefix="IDENTITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @property
    def key_bytes(self) -> bytes:
        if self.signing_key is None:
            return b""
        return self.signing_key.get_secret_value().encode()
