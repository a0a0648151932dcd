"""Conversion of Strawberry mutation inputs into three-state updates.

Strawberry leaves arguments the client never sent as ``strawberry.UNSET``
and sends explicit nulls as ``None``. That is exactly the absent/clear
distinction ``UpdateInput`` needs:

    input UpdateUserInput { displayName: String, bio: String }

    { displayName: "Ada" }          -> display_name SET, bio ABSENT
    { displayName: "Ada", bio: null } -> display_name SET, bio CLEAR
"""

from __future__ import annotations

import dataclasses
from typing import Any

from relaykit.core.mutations.values import UpdateInput

__all__ = ["to_update_input"]


def to_update_input(data: Any) -> UpdateInput:
    """Build an :class:`UpdateInput` from a Strawberry input object.

    Raises:
        TypeError: ``data`` is not a Strawberry input (dataclass) instance.
    """
    if not dataclasses.is_dataclass(data) or isinstance(data, type):
        raise TypeError(f"Expected a Strawberry input instance, got {type(data).__name__}")
    return UpdateInput.from_dataclass(data)
