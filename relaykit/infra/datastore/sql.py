"""SQLAlchemy-backed data store using keyset (seek) pagination.

Instead of OFFSET, the next page is found with a WHERE condition that seeks
directly past the cursor position:

    ORDER BY created_at ASC, id ASC, cursor at (t1, id1):
    WHERE (created_at > t1) OR (created_at = t1 AND id > id1)

Comparison operators flip for descending orderings and for backward scans.
NULL primaries sort first in ascending order, matching ``Ordering.sort_key``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, and_, func, or_, select

from relaykit.core.exceptions import NotFoundException
from relaykit.core.mutations.merger import apply_patch
from relaykit.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from relaykit.core.mutations.merger import Patch
    from relaykit.core.pagination.ordering import OrderedQuery, Ordering

logger = get_lazy_logger(__name__)


class KeysetFilter:
    """Apply an :class:`OrderedQuery` to a SQLAlchemy select.

    Adds:
    1. WHERE clause to seek past the cursor (if one is given)
    2. ORDER BY clause in scan order
    3. LIMIT clause (``query.limit`` already includes the sentinel row)

    Example:
        stmt = KeysetFilter(query, Post.created_at, Post.id).apply(select(Post))
    """

    def __init__(
        self,
        query: OrderedQuery,
        column: InstrumentedAttribute[Any],
        tiebreak: InstrumentedAttribute[Any],
    ) -> None:
        self.query = query
        self.column = column
        self.tiebreak = tiebreak
        # Backward scans walk the ordering in reverse
        self.scan_descending = query.ordering.descending == query.is_forward

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.query.cursor is not None:
            statement = statement.where(self._seek_condition())
        return self._apply_ordering(statement).limit(self.query.limit)

    def _apply_ordering(self, statement: Select[Any]) -> Select[Any]:
        if self.scan_descending:
            return statement.order_by(self.column.desc().nulls_last(), self.tiebreak.desc())
        return statement.order_by(self.column.asc().nulls_first(), self.tiebreak.asc())

    def _seek_condition(self) -> Any:
        """Build ``(a op v1) OR (a = v1 AND b op v2)`` for the cursor key."""
        primary, tiebreak = self.query.cursor
        if self.scan_descending:
            tiebreak_past = self.tiebreak < tiebreak
            if primary is None:
                return and_(self.column.is_(None), tiebreak_past)
            return or_(
                self.column < primary,
                and_(self.column == primary, tiebreak_past),
                self.column.is_(None),
            )

        tiebreak_past = self.tiebreak > tiebreak
        if primary is None:
            return or_(and_(self.column.is_(None), tiebreak_past), self.column.is_not(None))
        return or_(self.column > primary, and_(self.column == primary, tiebreak_past))


class SqlAlchemyDataStore:
    """Data store over one mapped model and an async session.

    Example:
        async with session_factory() as session:
            store = SqlAlchemyDataStore(session, Post, Ordering("created_at"))
            page = await ConnectionResolver(store, store.ordering).resolve(first=10)

    Args:
        session: Async session used for every statement.
        model: Mapped model class.
        ordering: Ordering the store pages over.
    """

    def __init__(self, session: AsyncSession, model: type[Any], ordering: Ordering) -> None:
        self.session = session
        self.model = model
        self.ordering = ordering
        self._pk_column = model.__mapper__.primary_key[0]

    def _filtered(self, statement: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        for name, value in filters.items():
            statement = statement.where(getattr(self.model, name) == value)
        return statement

    def _coerce_id(self, local_id: str) -> Any:
        try:
            python_type = self._pk_column.type.python_type
        except NotImplementedError:
            return local_id
        if isinstance(local_id, python_type):
            return local_id
        try:
            return python_type(local_id)
        except (TypeError, ValueError):
            return None

    async def fetch_ordered(self, query: OrderedQuery) -> Sequence[Any]:
        keyset = KeysetFilter(
            query,
            getattr(self.model, query.ordering.field),
            getattr(self.model, query.ordering.tiebreak),
        )
        stmt = keyset.apply(self._filtered(select(self.model), query.filters))
        result = await self.session.execute(stmt)
        rows = result.scalars().all()

        logger.debug(
            lambda: (
                f"db.fetch_ordered: {self.model.__name__} {query.ordering.signature} "
                f"{query.direction} limit={query.limit} -> {len(rows)} rows"
            )
        )
        return rows

    async def count(self, filters: Mapping[str, Any]) -> int:
        stmt = self._filtered(select(func.count()).select_from(self.model), filters)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get(self, local_id: str) -> Any | None:
        pk = self._coerce_id(local_id)
        if pk is None:
            return None
        return await self.session.get(self.model, pk)

    async def put(self, local_id: str, patch: Patch) -> Any:
        """Apply a validated patch and flush it.

        Raises:
            NotFoundException: No row has this local id.
        """
        instance = await self.get(local_id)
        if instance is None:
            raise NotFoundException(
                detail=f"{self.model.__name__} with ID {local_id} not found",
                extra={"local_id": str(local_id)},
            )
        apply_patch(instance, patch)
        await self.session.flush()
        await self.session.refresh(instance)

        logger.debug(
            lambda: f"db.put: {self.model.__name__}(id={local_id}) fields={sorted(patch.fields)}"
        )
        return instance

    async def create(self, values: Mapping[str, Any]) -> Any:
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)

        entity_id = getattr(instance, self._pk_column.key, None)
        logger.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance


__all__ = ["KeysetFilter", "SqlAlchemyDataStore"]
