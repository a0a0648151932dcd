"""Relay connection resolver over an ordered source.

Implements forward (``first``/``after``) and backward (``last``/``before``)
cursor pagination:

1. Validate the arguments and decode the cursor before touching the store.
2. Ask the store for ``size + 1`` nodes strictly past the cursor. The extra
   (sentinel) node only signals that another page exists.
3. Truncate to ``size``; backward slices arrive nearest-first and are
   reversed back into source order.
4. Mint one cursor per returned edge.

The resolver keeps no state between requests. Repeating an identical request
against an unchanged source returns identical edges. When rows are inserted
or deleted between requests, a cursor still resumes right after its own key,
so paging continues near the same logical position, but the pages are not a
snapshot-consistent view of the source.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from relaykit.core.pagination.args import Direction, parse_connection_args
from relaykit.core.pagination.cursor import CursorCodec
from relaykit.core.pagination.ordering import OrderedQuery
from relaykit.core.pagination.schemas import Connection, Edge, PageInfo
from relaykit.infra.datastore.protocols import CountableSource
from relaykit.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from relaykit.core.pagination.ordering import Ordering
    from relaykit.infra.datastore.protocols import OrderedSource

NodeT = TypeVar("NodeT")

logger = get_lazy_logger(__name__)


class ConnectionResolver(Generic[NodeT]):
    """Resolve connection fields against an ordered source.

    Example:
        users = ConnectionResolver(store, Ordering("created_at", descending=True))

        page = await users.resolve(first=10)
        next_page = await users.resolve(first=10, after=page.page_info.end_cursor)
        previous = await users.resolve(last=10, before=next_page.page_info.start_cursor)

    Args:
        source: Store implementing ``fetch_ordered`` (and optionally ``count``).
        ordering: Sort order the source applies.
        codec: Cursor codec; defaults to one for ``ordering``.
        max_page_size: Page-size ceiling; defaults to PaginationSettings.
        default_page_size: Size used without ``first``/``last``; defaults to PaginationSettings.
        include_total_count: Compute ``total_count`` by default; defaults to PaginationSettings.
    """

    def __init__(
        self,
        source: OrderedSource,
        ordering: Ordering,
        *,
        codec: CursorCodec | None = None,
        max_page_size: int | None = None,
        default_page_size: int | None = None,
        include_total_count: bool | None = None,
    ) -> None:
        from relaykit.core.settings import get_pagination_settings

        settings = get_pagination_settings()
        self.source = source
        self.ordering = ordering
        self.codec = codec or CursorCodec(ordering)
        self.max_page_size = max_page_size if max_page_size is not None else settings.max_page_size
        self.default_page_size = (
            default_page_size if default_page_size is not None else settings.default_page_size
        )
        self.include_total_count = (
            include_total_count if include_total_count is not None else settings.include_total_count
        )
        if self.codec.ordering.signature != ordering.signature:
            raise ValueError("Cursor codec ordering does not match the resolver ordering")

    async def resolve(
        self,
        *,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
        filters: Mapping[str, Any] | None = None,
        include_total_count: bool | None = None,
    ) -> Connection[NodeT]:
        """Fetch one page of the connection.

        Raises:
            InvalidArgumentsError: Forward and backward arguments are mixed,
                or a size is not positive.
            PageSizeExceededError: ``first``/``last`` exceeds the ceiling.
            InvalidCursorError: ``after``/``before`` cannot be decoded.
        """
        request = parse_connection_args(
            first=first,
            after=after,
            last=last,
            before=before,
            max_page_size=self.max_page_size,
            default_page_size=self.default_page_size,
        )
        cursor_key = self.codec.decode(request.cursor) if request.cursor is not None else None

        query = OrderedQuery(
            ordering=self.ordering,
            limit=request.size + 1,
            direction=request.direction,
            cursor=cursor_key,
            filters=dict(filters or {}),
        )
        rows = list(await self.source.fetch_ordered(query))

        has_more = len(rows) > request.size
        rows = rows[: request.size]
        if request.direction is Direction.BACKWARD:
            rows.reverse()

        edges: list[Edge[NodeT]] = [
            Edge(node=row, cursor=self.codec.create_cursor(row)) for row in rows
        ]

        started_mid_list = cursor_key is not None
        if request.is_forward:
            has_next, has_previous = has_more, started_mid_list
        else:
            has_next, has_previous = started_mid_list, has_more

        page_info = PageInfo(
            has_previous_page=has_previous,
            has_next_page=has_next,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        )

        want_total = self.include_total_count if include_total_count is None else include_total_count
        total_count = None
        if want_total and isinstance(self.source, CountableSource):
            total_count = await self.source.count(query.filters)

        logger.debug(
            lambda: (
                f"connection.resolve: {self.ordering.signature} "
                f"({request.direction}, size={request.size}) -> {len(edges)} edges, "
                f"has_next={has_next}, has_previous={has_previous}"
            )
        )

        return Connection(edges=edges, page_info=page_info, total_count=total_count)


__all__ = ["ConnectionResolver"]
