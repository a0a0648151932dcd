"""Generic Relay connection types for Strawberry.

Strawberry names parametrized generics after their node type, so
``ConnectionType[UserNode]`` with ``@strawberry.type(name="User")`` on the
node becomes ``UserConnection`` with ``UserEdge`` edges in the schema.

Example:
    @strawberry.type(name="User")
    class UserNode:
        id: strawberry.ID
        display_name: str

    @strawberry.type
    class Query:
        @strawberry.field
        async def users(self, first: int | None = None, after: str | None = None) -> ConnectionType[UserNode]:
            page = await users_resolver.resolve(first=first, after=after)
            return to_connection_type(page, UserNode.from_row)
"""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import strawberry

from relaykit.core.pagination.schemas import Connection

__all__ = [
    "ConnectionType",
    "EdgeType",
    "PageInfoType",
    "to_connection_type",
]

NodeT = TypeVar("NodeT")


@strawberry.type(
    name="PageInfo",
    description="Pagination metadata following GraphQL Relay specification",
)
class PageInfoType:
    """GraphQL Relay PageInfo for cursor-based pagination.

    Mirrors relaykit.core.pagination.schemas.PageInfo.
    """

    has_previous_page: bool = strawberry.field(description="Whether previous items exist")
    has_next_page: bool = strawberry.field(description="Whether more items exist")
    start_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = strawberry.field(
        default=None,
        description="Cursor of the last item",
    )


@strawberry.type(name="Edge", description="Edge containing a node and its cursor")
class EdgeType(Generic[NodeT]):
    node: NodeT = strawberry.field(description="The item at the end of the edge")
    cursor: str = strawberry.field(description="Cursor for pagination")


@strawberry.type(name="Connection", description="Relay connection of nodes")
class ConnectionType(Generic[NodeT]):
    edges: list[EdgeType[NodeT]] = strawberry.field(description="List of edges")
    page_info: PageInfoType = strawberry.field(description="Pagination information")
    total_count: int | None = strawberry.field(
        default=None,
        description="Total count (optional, can be expensive)",
    )


def to_connection_type(
    connection: Connection[Any],
    convert: Callable[[Any], NodeT] | None = None,
) -> ConnectionType[NodeT]:
    """Convert a resolved :class:`Connection` into its Strawberry type.

    Args:
        connection: Result of ``ConnectionResolver.resolve``.
        convert: Maps each stored node to its GraphQL node type.
    """
    page_info = connection.page_info
    return ConnectionType(
        edges=[
            EdgeType(node=convert(edge.node) if convert else edge.node, cursor=edge.cursor)
            for edge in connection.edges
        ],
        page_info=PageInfoType(
            has_previous_page=page_info.has_previous_page,
            has_next_page=page_info.has_next_page,
            start_cursor=page_info.start_cursor,
            end_cursor=page_info.end_cursor,
        ),
        total_count=connection.total_count,
    )
