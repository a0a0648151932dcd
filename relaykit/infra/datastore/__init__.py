"""Data store contracts and reference implementations.

The in-memory and SQLAlchemy stores live in ``relaykit.infra.datastore.memory``
and ``relaykit.infra.datastore.sql``.
"""

from relaykit.infra.datastore.protocols import CountableSource, DataStore, OrderedSource

__all__ = ["CountableSource", "DataStore", "OrderedSource"]
