"""Authorization gate protocol definitions.

Resolvers ask an external authorization collaborator whether an actor may
perform an action on a resource before reading or writing anything. This
package only fixes the contract; a denial is surfaced unchanged as
``UnauthorizedError``.

Pattern: Protocol-based abstraction (PEP 544). Any class implementing
``check`` satisfies the protocol without explicit inheritance.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from relaykit.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class Decision(StrEnum):
    ALLOW = "allow"
    DENY = "deny"


@runtime_checkable
class AuthorizationGate(Protocol):
    """Protocol for authorization decisions.

    Implementations:
        - StaticAuthorizationGate: Test double (see ``relaykit.infra.auth.testing``)

    Example:
        decision = await gate.check(actor, "user.update", "User:42")
        if decision is Decision.DENY:
            ...
    """

    async def check(self, actor: Any, action: str, resource: str | None = None) -> Decision:
        """Decide whether ``actor`` may perform ``action`` on ``resource``."""
        ...


async def authorize(
    gate: AuthorizationGate,
    actor: Any,
    action: str,
    resource: str | None = None,
) -> None:
    """Ask the gate and raise on denial.

    Raises:
        UnauthorizedError: The gate denied the action.
    """
    decision = await gate.check(actor, action, resource)
    if decision is not Decision.ALLOW:
        logger.info(
            "Authorization denied",
            extra={"action": action, "resource": resource},
        )
        raise UnauthorizedError(action=action, resource=resource)


__all__ = ["AuthorizationGate", "Decision", "authorize"]
