"""Data store protocol consumed by connection and mutation resolvers.

The store is an external collaborator: this package only fixes the contract.
Implementations in this package (``InMemoryDataStore``, ``SqlAlchemyDataStore``)
double as reference behaviour and test doubles.

Pattern: Protocol-based abstraction (PEP 544). Any class implementing these
methods satisfies the protocol without explicit inheritance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from relaykit.core.mutations.merger import Patch
    from relaykit.core.pagination.ordering import OrderedQuery


@runtime_checkable
class OrderedSource(Protocol):
    """Anything the connection resolver can page over."""

    async def fetch_ordered(self, query: OrderedQuery) -> Sequence[Any]:
        """Return at most ``query.limit`` nodes strictly past ``query.cursor``.

        Forward queries return nodes in ordering order; backward queries
        return them nearest-first (reverse ordering order).
        """
        ...


@runtime_checkable
class CountableSource(Protocol):
    """Source able to report a total count for ``totalCount``."""

    async def count(self, filters: Mapping[str, Any]) -> int:
        ...


@runtime_checkable
class DataStore(OrderedSource, Protocol):
    """Full store contract: ordered reads plus keyed get/put.

    ``get`` and ``put`` take the raw local id, never a global identifier.
    ``put`` is only called with a patch that passed validation.
    """

    async def get(self, local_id: str) -> Any | None:
        ...

    async def put(self, local_id: str, patch: Patch) -> Any:
        ...


__all__ = ["CountableSource", "DataStore", "OrderedSource"]
