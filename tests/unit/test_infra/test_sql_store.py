"""Integration tests for the SQLAlchemy keyset store on SQLite (aiosqlite)."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import DateTime, Integer, String, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from relaykit.core.exceptions import NotFoundException
from relaykit.core.mutations import EntitySchema, FieldSpec, PartialUpdateMerger
from relaykit.core.pagination import (
    ConnectionResolver,
    Direction,
    OrderedQuery,
    Ordering,
    OrderKey,
)
from relaykit.infra.datastore.sql import KeysetFilter, SqlAlchemyDataStore

BASE_TIME = datetime(2025, 1, 1)


class Base(DeclarativeBase):
    pass


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(100))
    published_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    author: Mapped[str] = mapped_column(String(50))


POST = EntitySchema(
    "Post",
    (
        FieldSpec("title", nullable=False, required=True),
        FieldSpec("published_at"),
        FieldSpec("author", nullable=False, updatable=False),
    ),
)


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            Post(
                id=i,
                title=f"Post {i}",
                # Posts 1 and 2 are drafts; the rest share timestamps in pairs
                published_at=None if i <= 2 else BASE_TIME + timedelta(hours=i // 2),
                author="ada" if i % 3 else "grace",
            )
            for i in range(1, 13)
        )
        await session.commit()
        yield session

    await engine.dispose()


def ids(rows) -> list[int]:
    return [row.id for row in rows]


@pytest.mark.integration
class TestKeysetFilter:
    """Tests for the seek predicate."""

    def test_forward_ascending_sql(self):
        query = OrderedQuery(Ordering("published_at"), limit=6, cursor=OrderKey(BASE_TIME, 3))

        stmt = KeysetFilter(query, Post.published_at, Post.id).apply(select(Post))
        sql = str(stmt.compile())

        assert "posts.published_at >" in sql
        assert "posts.id >" in sql
        assert "LIMIT" in sql

    def test_backward_flips_operators(self):
        query = OrderedQuery(
            Ordering("published_at"),
            limit=6,
            direction=Direction.BACKWARD,
            cursor=OrderKey(BASE_TIME, 3),
        )

        stmt = KeysetFilter(query, Post.published_at, Post.id).apply(select(Post))
        sql = str(stmt.compile())

        assert "posts.published_at <" in sql
        assert "posts.id <" in sql


@pytest.mark.integration
class TestSqlAlchemyDataStore:
    """Tests for SqlAlchemyDataStore against SQLite."""

    @pytest.mark.parametrize("size", [1, 2, 5])
    async def test_forward_paging_matches_python_order(self, session: AsyncSession, size: int):
        ordering = Ordering("published_at")
        resolver = ConnectionResolver(SqlAlchemyDataStore(session, Post, ordering), ordering)

        seen: list[int] = []
        after = None
        while True:
            page = await resolver.resolve(first=size, after=after)
            seen.extend(ids(page.nodes))
            if not page.page_info.has_next_page:
                break
            after = page.page_info.end_cursor

        # NULL primaries first, then by (published_at, id)
        assert seen == list(range(1, 13))

    async def test_backward_paging(self, session: AsyncSession):
        ordering = Ordering("published_at")
        resolver = ConnectionResolver(SqlAlchemyDataStore(session, Post, ordering), ordering)

        everything = await resolver.resolve(first=12)
        before = everything.edges[6].cursor

        page = await resolver.resolve(last=4, before=before)

        assert ids(page.nodes) == [3, 4, 5, 6]
        assert page.page_info.has_previous_page is True
        assert page.page_info.has_next_page is True

    async def test_backward_into_null_primaries(self, session: AsyncSession):
        ordering = Ordering("published_at")
        resolver = ConnectionResolver(SqlAlchemyDataStore(session, Post, ordering), ordering)
        everything = await resolver.resolve(first=12)

        page = await resolver.resolve(last=10, before=everything.edges[3].cursor)

        assert ids(page.nodes) == [1, 2, 3]
        assert page.page_info.has_previous_page is False

    async def test_descending_paging(self, session: AsyncSession):
        ordering = Ordering("published_at", descending=True)
        resolver = ConnectionResolver(SqlAlchemyDataStore(session, Post, ordering), ordering)

        first = await resolver.resolve(first=6)
        second = await resolver.resolve(first=6, after=first.page_info.end_cursor)

        assert ids(first.nodes) == [12, 11, 10, 9, 8, 7]
        assert ids(second.nodes) == [6, 5, 4, 3, 2, 1]
        assert second.page_info.has_next_page is False

    async def test_filters_and_count(self, session: AsyncSession):
        ordering = Ordering("published_at")
        store = SqlAlchemyDataStore(session, Post, ordering)
        resolver = ConnectionResolver(store, ordering)

        page = await resolver.resolve(
            first=50, filters={"author": "grace"}, include_total_count=True
        )

        assert ids(page.nodes) == [3, 6, 9, 12]
        assert page.total_count == 4

    async def test_get_coerces_local_id(self, session: AsyncSession):
        store = SqlAlchemyDataStore(session, Post, Ordering("published_at"))

        post = await store.get("4")

        assert post is not None
        assert post.title == "Post 4"
        assert await store.get("not-a-number") is None

    async def test_put_applies_validated_patch(self, session: AsyncSession):
        store = SqlAlchemyDataStore(session, Post, Ordering("published_at"))
        patch = PartialUpdateMerger(POST).merge({"title": "Renamed", "published_at": None})

        post = await store.put("5", patch)

        assert post.title == "Renamed"
        assert post.published_at is None
        assert post.author == "ada"

    async def test_put_missing_row(self, session: AsyncSession):
        store = SqlAlchemyDataStore(session, Post, Ordering("published_at"))

        with pytest.raises(NotFoundException):
            await store.put("999", PartialUpdateMerger(POST).merge({"title": "x"}))

    async def test_create(self, session: AsyncSession):
        store = SqlAlchemyDataStore(session, Post, Ordering("published_at"))
        values = PartialUpdateMerger(POST).validate_create({"title": "New", "author": "linus"})

        post = await store.create(values)

        assert post.id == 13
        assert await store.count({}) == 13
