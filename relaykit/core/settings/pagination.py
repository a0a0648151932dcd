"""Pagination settings for connection fields.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=20, PAGINATION_MAX_PAGE_SIZE=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_page_size: Page size used when neither ``first`` nor ``last`` is given.
        max_page_size: System-wide ceiling for ``first``/``last``.
        include_total_count: Compute ``totalCount`` by default (one extra count query).
    """

    default_page_size: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default page size when first/last is not specified",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    include_total_count: bool = Field(
        default=False,
        description="Include totalCount in connections (can be expensive)",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _default_within_ceiling(self) -> PaginationSettings:
        if self.default_page_size > self.max_page_size:
            msg = (
                f"default_page_size ({self.default_page_size}) cannot exceed "
                f"max_page_size ({self.max_page_size})"
            )
            raise ValueError(msg)
        return self
