"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: environment defaults and cache reset
    - Codec Fixtures: token sealer, identifier and cursor codecs
    - Store Fixtures: in-memory store with a small user table
    - Registry Fixtures: process-wide registry teardown
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import pytest

# Ensure tests run with deterministic settings
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("IDENTITY_CHECKSUM_ENABLED", "true")
os.environ.setdefault("PAGINATION_DEFAULT_PAGE_SIZE", "20")
os.environ.setdefault("PAGINATION_MAX_PAGE_SIZE", "100")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

from relaykit.core.identity import GlobalIdCodec  # noqa: E402
from relaykit.core.pagination import CursorCodec, Ordering  # noqa: E402
from relaykit.core.settings import clear_settings_cache  # noqa: E402
from relaykit.core.tokens import TokenSealer  # noqa: E402
from relaykit.features.graphql.registry import uninstall_registry  # noqa: E402
from relaykit.infra.datastore.memory import InMemoryDataStore  # noqa: E402

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Reload settings for every test so monkeypatched env vars take effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _no_installed_registry():
    """Start and finish every test without a process-wide registry."""
    uninstall_registry()
    yield
    uninstall_registry()


# ============================================================================
# Codec Fixtures
# ============================================================================


@pytest.fixture
def sealer() -> TokenSealer:
    return TokenSealer(key=b"test-key")


@pytest.fixture
def id_codec(sealer: TokenSealer) -> GlobalIdCodec:
    return GlobalIdCodec(["User", "Post"], sealer=sealer)


@pytest.fixture
def ordering() -> Ordering:
    """Users ordered by creation time, oldest first."""
    return Ordering("created_at")


@pytest.fixture
def cursor_codec(ordering: Ordering, sealer: TokenSealer) -> CursorCodec:
    return CursorCodec(ordering, sealer=sealer)


# ============================================================================
# Store Fixtures
# ============================================================================


def _make_users(count: int, *, duplicate_every: int = 3) -> list[dict]:
    """Build user rows; every ``duplicate_every`` rows share a created_at value."""
    return [
        {
            "id": f"{i:03d}",
            "created_at": BASE_TIME + timedelta(minutes=i // duplicate_every),
            "display_name": f"User {i}",
            "team": "red" if i % 2 else "blue",
            "bio": None,
        }
        for i in range(count)
    ]


@pytest.fixture
def user_factory():
    """Factory building user rows: ``user_factory(count, duplicate_every=3)``."""
    return _make_users


@pytest.fixture
def users() -> list[dict]:
    return _make_users(25)


@pytest.fixture
def user_store(ordering: Ordering, users: list[dict]) -> InMemoryDataStore:
    return InMemoryDataStore(ordering, users)
