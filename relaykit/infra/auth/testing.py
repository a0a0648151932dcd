"""Authorization gate test double.

StaticAuthorizationGate implements the AuthorizationGate protocol without a
mocking library: it allows a fixed set of actions and records every check.

Usage:
    gate = StaticAuthorizationGate(allowed={"user.read"})
    await gate.check(actor, "user.read")      # Decision.ALLOW
    await gate.check(actor, "user.update")    # Decision.DENY

    StaticAuthorizationGate.allow_all()
    StaticAuthorizationGate.deny_all()
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Self

from relaykit.infra.auth.protocols import Decision


class StaticAuthorizationGate:
    """Allow-list authorization gate for tests.

    Args:
        allowed: Actions to allow. ``"*"`` allows everything.
    """

    def __init__(self, allowed: Iterable[str] = ()) -> None:
        self.allowed = frozenset(allowed)
        self.calls: list[tuple[Any, str, str | None]] = []

    @classmethod
    def allow_all(cls) -> Self:
        return cls(allowed={"*"})

    @classmethod
    def deny_all(cls) -> Self:
        return cls()

    async def check(self, actor: Any, action: str, resource: str | None = None) -> Decision:
        self.calls.append((actor, action, resource))
        if "*" in self.allowed or action in self.allowed:
            return Decision.ALLOW
        return Decision.DENY


__all__ = ["StaticAuthorizationGate"]
