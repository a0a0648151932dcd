"""Strawberry types shared by connection fields."""

from relaykit.features.graphql.types.pagination import (
    ConnectionType,
    EdgeType,
    PageInfoType,
    to_connection_type,
)

__all__ = ["ConnectionType", "EdgeType", "PageInfoType", "to_connection_type"]
