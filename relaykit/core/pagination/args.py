"""Validation of Relay connection arguments.

A connection field accepts either forward arguments ``(first, after)`` or
backward arguments ``(last, before)``, never a mix of both.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from relaykit.core.exceptions import InvalidArgumentsError, PageSizeExceededError


class Direction(StrEnum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Validated pagination request.

    Attributes:
        direction: Paging direction.
        size: Number of edges requested.
        cursor: Opaque cursor to page past (``after`` or ``before``), if any.
    """

    direction: Direction
    size: int
    cursor: str | None = None

    @property
    def is_forward(self) -> bool:
        return self.direction is Direction.FORWARD


def _check_size(name: str, value: int, max_page_size: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentsError(f"'{name}' must be an integer", arguments={name: value})
    if value <= 0:
        raise InvalidArgumentsError(f"'{name}' must be a positive integer", arguments={name: value})
    if value > max_page_size:
        raise PageSizeExceededError(value, max_page_size)


def parse_connection_args(
    *,
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
    max_page_size: int,
    default_page_size: int,
) -> PageRequest:
    """Validate connection arguments into a :class:`PageRequest`.

    Args:
        first: Forward page size.
        after: Forward cursor (exclusive).
        last: Backward page size.
        before: Backward cursor (exclusive).
        max_page_size: Ceiling for ``first``/``last``.
        default_page_size: Forward page size when no size is given.

    Raises:
        InvalidArgumentsError: Forward and backward arguments are mixed, or a
            size is not a positive integer.
        PageSizeExceededError: A size exceeds ``max_page_size``.

    Example:
        >>> parse_connection_args(first=10, max_page_size=100, default_page_size=20)
        PageRequest(direction=<Direction.FORWARD: 'forward'>, size=10, cursor=None)
    """
    forward = first is not None or after is not None
    backward = last is not None or before is not None
    if forward and backward:
        raise InvalidArgumentsError(
            "Cannot combine forward (first/after) and backward (last/before) arguments",
            arguments={"first": first, "after": after, "last": last, "before": before},
        )

    if backward:
        size = last if last is not None else default_page_size
        _check_size("last", size, max_page_size)
        return PageRequest(Direction.BACKWARD, size, before)

    size = first if first is not None else default_page_size
    _check_size("first", size, max_page_size)
    return PageRequest(Direction.FORWARD, size, after)


__all__ = ["Direction", "PageRequest", "parse_connection_args"]
