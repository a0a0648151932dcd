"""GraphQL surface: resolver registry, error presentation and connection types."""

from relaykit.features.graphql.error_handler import ApiErrorExtension, process_graphql_errors
from relaykit.features.graphql.inputs import to_update_input
from relaykit.features.graphql.registry import (
    ResolverRegistry,
    ResolverRegistryBuilder,
    get_registry,
    install_registry,
    uninstall_registry,
)
from relaykit.features.graphql.types import (
    ConnectionType,
    EdgeType,
    PageInfoType,
    to_connection_type,
)

__all__ = [
    "ApiErrorExtension",
    "ConnectionType",
    "EdgeType",
    "PageInfoType",
    "ResolverRegistry",
    "ResolverRegistryBuilder",
    "get_registry",
    "install_registry",
    "process_graphql_errors",
    "to_connection_type",
    "to_update_input",
    "uninstall_registry",
]
