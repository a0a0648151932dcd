"""Connection result models.

A resolved connection is a page of edges in source order plus the page info
a client needs to request the neighbouring pages:

    {edges: [{node, cursor}], pageInfo: {...}, totalCount}

These are plain pydantic models; ``relaykit.features.graphql.types`` maps
them onto Strawberry types.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

NodeT = TypeVar("NodeT")


class PageInfo(BaseModel):
    """Navigation flags and boundary cursors of one page.

    ``start_cursor`` and ``end_cursor`` are None exactly when the page has
    no edges.
    """

    model_config = ConfigDict(frozen=True)

    has_previous_page: bool = Field(description="Nodes exist before this page")
    has_next_page: bool = Field(description="Nodes exist after this page")
    start_cursor: str | None = Field(default=None, description="Cursor of the first edge")
    end_cursor: str | None = Field(default=None, description="Cursor of the last edge")


class Edge(BaseModel, Generic[NodeT]):
    """A node together with the cursor that resumes right after it."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    node: NodeT
    cursor: str


class Connection(BaseModel, Generic[NodeT]):
    """One page of a paginated field.

    Attributes:
        edges: Edges in source order, whichever direction was paged
        page_info: Navigation metadata
        total_count: Size of the filtered source, None unless requested
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    edges: list[Edge[NodeT]] = Field(default_factory=list)
    page_info: PageInfo
    total_count: int | None = None

    @property
    def nodes(self) -> list[NodeT]:
        return [edge.node for edge in self.edges]


__all__ = ["Connection", "Edge", "PageInfo"]
