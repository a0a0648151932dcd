"""Relay cursor pagination.

    resolver = ConnectionResolver(store, Ordering("created_at", descending=True))
    connection = await resolver.resolve(first=20, after=cursor)

A cursor encodes the order key of one node under one ordering. Clients pass
cursors back unchanged; the store seeks directly past that key.
"""

from relaykit.core.pagination.args import Direction, PageRequest, parse_connection_args
from relaykit.core.pagination.cursor import CursorCodec
from relaykit.core.pagination.ordering import OrderedQuery, Ordering, OrderKey
from relaykit.core.pagination.resolver import ConnectionResolver
from relaykit.core.pagination.schemas import Connection, Edge, PageInfo

__all__ = [
    "Connection",
    "ConnectionResolver",
    "CursorCodec",
    "Direction",
    "Edge",
    "OrderKey",
    "OrderedQuery",
    "Ordering",
    "PageInfo",
    "PageRequest",
    "parse_connection_args",
]
