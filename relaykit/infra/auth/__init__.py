"""Authorization collaborator contract."""

from relaykit.infra.auth.protocols import AuthorizationGate, Decision, authorize

__all__ = ["AuthorizationGate", "Decision", "authorize"]
