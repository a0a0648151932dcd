"""In-memory data store.

Reference implementation of the ``DataStore`` contract, used by tests, the
CLI and anyone wiring the resolvers without a database. Rows are plain dicts
keyed by their local id; every read returns copies, so callers never mutate
stored state behind the store's back.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from relaykit.core.exceptions import NotFoundException
from relaykit.core.mutations.merger import apply_patch
from relaykit.core.pagination.ordering import Ordering
from relaykit.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from relaykit.core.mutations.merger import Patch
    from relaykit.core.pagination.ordering import OrderedQuery

logger = get_lazy_logger(__name__)


class InMemoryDataStore:
    """Dict-backed store paging over an :class:`Ordering`.

    Example:
        store = InMemoryDataStore(
            Ordering("created_at", descending=True),
            rows=[{"id": "1", "created_at": t1}, {"id": "2", "created_at": t2}],
        )
        resolver = ConnectionResolver(store, store.ordering)

    Args:
        ordering: Ordering the store pages over.
        rows: Initial rows.
        id_field: Attribute holding the local id of a row.
    """

    def __init__(
        self,
        ordering: Ordering,
        rows: Iterable[Mapping[str, Any]] = (),
        *,
        id_field: str = "id",
    ) -> None:
        self.ordering = ordering
        self.id_field = id_field
        self._rows: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        for row in rows:
            self._insert(dict(row))

    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        if row.get(self.id_field) is None:
            row[self.id_field] = str(next(self._ids))
        local_id = str(row[self.id_field])
        if local_id in self._rows:
            raise ValueError(f"Duplicate {self.id_field} {local_id!r}")
        self._rows[local_id] = row
        return row

    def __len__(self) -> int:
        return len(self._rows)

    def _matching(self, filters: Mapping[str, Any]) -> list[dict[str, Any]]:
        return [
            row
            for row in self._rows.values()
            if all(row.get(name) == value for name, value in filters.items())
        ]

    async def fetch_ordered(self, query: OrderedQuery) -> list[dict[str, Any]]:
        ordering = query.ordering
        rows = sorted(
            self._matching(query.filters),
            key=lambda row: Ordering.sort_key(ordering.key_for(row)),
            reverse=ordering.descending,
        )
        if not query.is_forward:
            rows.reverse()

        if query.cursor is not None:
            # Scan order is descending when exactly one of ordering/direction flips it
            scan_descending = ordering.descending == query.is_forward
            boundary = Ordering.sort_key(query.cursor)
            if scan_descending:
                rows = [r for r in rows if Ordering.sort_key(ordering.key_for(r)) < boundary]
            else:
                rows = [r for r in rows if Ordering.sort_key(ordering.key_for(r)) > boundary]

        page = [dict(row) for row in rows[: query.limit]]
        logger.debug(
            lambda: (
                f"memory.fetch_ordered: {ordering.signature} {query.direction} "
                f"limit={query.limit} -> {len(page)} rows"
            )
        )
        return page

    async def count(self, filters: Mapping[str, Any]) -> int:
        return len(self._matching(filters))

    async def get(self, local_id: str) -> dict[str, Any] | None:
        row = self._rows.get(str(local_id))
        return dict(row) if row is not None else None

    async def put(self, local_id: str, patch: Patch) -> dict[str, Any]:
        """Apply a validated patch to an existing row.

        Raises:
            NotFoundException: No row has this local id.
        """
        row = self._rows.get(str(local_id))
        if row is None:
            raise NotFoundException(
                detail=f"No row with {self.id_field} {local_id!r}",
                extra={"local_id": str(local_id)},
            )
        apply_patch(row, patch)
        logger.debug(lambda: f"memory.put: {local_id} fields={sorted(patch.fields)}")
        return dict(row)

    async def create(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a new row, assigning a local id when none is given."""
        return dict(self._insert(dict(values)))


__all__ = ["InMemoryDataStore"]
