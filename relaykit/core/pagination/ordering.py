"""Ordering definitions for cursor pagination.

Every paginated source is totally ordered by ``(primary, tiebreak)``. The
tiebreak (usually the primary key) must be unique per node so that rows
sharing a primary sort value still have a stable position.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from relaykit.core.pagination.args import Direction


class OrderKey(NamedTuple):
    """Position of a node within an ordering."""

    primary: Any
    tiebreak: Any


@dataclass(frozen=True, slots=True)
class Ordering:
    """Sort order of a paginated source.

    Attributes:
        field: Name of the primary sort attribute.
        tiebreak: Name of the unique attribute breaking ties.
        descending: Sort the primary (and tiebreak) descending.
        name: Optional explicit signature; defaults to one derived from the fields.

    Example:
        newest_first = Ordering("created_at", descending=True)
        key = newest_first.key_for(post)   # OrderKey(post.created_at, post.id)
    """

    field: str
    tiebreak: str = "id"
    descending: bool = False
    name: str | None = None

    @property
    def signature(self) -> str:
        """Identifies the ordering inside cursors.

        A cursor minted under one signature is rejected by a codec using another.
        """
        if self.name:
            return self.name
        direction = "desc" if self.descending else "asc"
        return f"{self.field}.{self.tiebreak}.{direction}"

    def key_for(self, node: Any) -> OrderKey:
        """Extract the order key of a node (mapping lookup or attribute access)."""
        if isinstance(node, Mapping):
            return OrderKey(node.get(self.field), node[self.tiebreak])
        return OrderKey(getattr(node, self.field, None), getattr(node, self.tiebreak))

    @staticmethod
    def sort_key(key: OrderKey) -> tuple[bool, Any, Any]:
        """Ascending comparison key; ``None`` primaries sort first."""
        return (key.primary is not None, key.primary, key.tiebreak)


@dataclass(frozen=True, slots=True)
class OrderedQuery:
    """Request a data store answers with an ordered slice of nodes.

    Forward queries return nodes strictly after ``cursor`` in ordering order.
    Backward queries return nodes strictly before ``cursor`` walking from the
    end, nearest first (reverse ordering order). Without a cursor the slice
    starts at the beginning (forward) or the end (backward).

    Attributes:
        ordering: Sort order of the source.
        limit: Maximum number of nodes to return.
        direction: Scan direction.
        cursor: Exclusive order key to scan past.
        filters: Equality filters (attribute name to value).
    """

    ordering: Ordering
    limit: int
    direction: Direction = Direction.FORWARD
    cursor: OrderKey | None = None
    filters: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_forward(self) -> bool:
        return self.direction is Direction.FORWARD


__all__ = ["OrderKey", "OrderedQuery", "Ordering"]
