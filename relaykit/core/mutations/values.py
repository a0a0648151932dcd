"""Three-state update values.

An update input distinguishes, for every field:

- ``ABSENT``: not mentioned, leave the stored value alone;
- ``CLEAR``: explicit null, clear the stored value;
- ``SET``: explicit value, store it.

``None`` therefore never means "not provided" inside an :class:`UpdateInput`.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

import strawberry
from pydantic import BaseModel


class FieldState(StrEnum):
    ABSENT = "absent"
    CLEAR = "clear"
    SET = "set"


@dataclass(frozen=True, slots=True)
class FieldValue:
    """Tagged value for one update field."""

    state: FieldState
    value: Any = None

    def __post_init__(self) -> None:
        if self.state is FieldState.SET and self.value is None:
            raise ValueError("Use FieldValue.clear() for an explicit null")
        if self.state is not FieldState.SET and self.value is not None:
            raise ValueError(f"A {self.state} field value carries no payload")

    @classmethod
    def set(cls, value: Any) -> FieldValue:
        return cls(FieldState.SET, value)

    @classmethod
    def clear(cls) -> FieldValue:
        return _CLEAR

    @classmethod
    def absent(cls) -> FieldValue:
        return _ABSENT

    @classmethod
    def of(cls, value: Any) -> FieldValue:
        """Explicitly provided value: ``None`` clears, anything else sets."""
        return _CLEAR if value is None else cls(FieldState.SET, value)

    @property
    def is_present(self) -> bool:
        return self.state is not FieldState.ABSENT


_ABSENT = FieldValue(FieldState.ABSENT)
_CLEAR = FieldValue(FieldState.CLEAR)


def _field_value(value: Any) -> FieldValue:
    if isinstance(value, FieldValue):
        return value
    if value is strawberry.UNSET:
        return _ABSENT
    return FieldValue.of(value)


class UpdateInput(Mapping[str, FieldValue]):
    """Immutable mapping of explicitly present fields to their values.

    Absent fields are simply not in the mapping; ``input.state_of(name)``
    reports ``ABSENT`` for them.

    Example:
        UpdateInput.from_mapping({"bio": None, "display_name": "Ada"})
        # bio -> CLEAR, display_name -> SET("Ada"), everything else ABSENT

        UpdateInput.from_model(UserUpdate(bio=None))
        # only fields in model_fields_set are present
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, FieldValue] | None = None) -> None:
        present = {
            name: value for name, value in (fields or {}).items() if value.is_present
        }
        self._fields = MappingProxyType(present)

    def __getitem__(self, name: str) -> FieldValue:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"UpdateInput({dict(self._fields)!r})"

    def state_of(self, name: str) -> FieldState:
        return self._fields.get(name, _ABSENT).state

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> UpdateInput:
        """Build from a plain mapping: missing keys are absent, ``None`` clears.

        ``FieldValue`` entries are kept as given and ``strawberry.UNSET`` is absent,
        so raw values and tagged values can be mixed.
        """
        return cls({name: _field_value(value) for name, value in data.items()})

    @classmethod
    def from_model(cls, model: BaseModel) -> UpdateInput:
        """Build from a pydantic model using ``model_fields_set``.

        Fields the client never sent stay absent even when the model gives
        them a default.
        """
        return cls({name: FieldValue.of(getattr(model, name)) for name in model.model_fields_set})

    @classmethod
    def from_dataclass(cls, data: Any) -> UpdateInput:
        """Build from a dataclass instance such as a Strawberry input.

        Fields left as ``strawberry.UNSET`` are absent.
        """
        return cls(
            {field.name: _field_value(getattr(data, field.name)) for field in dataclasses.fields(data)}
        )

    @classmethod
    def coerce(cls, data: UpdateInput | Mapping[str, Any] | BaseModel | Any) -> UpdateInput:
        if isinstance(data, UpdateInput):
            return data
        if isinstance(data, BaseModel):
            return cls.from_model(data)
        if isinstance(data, Mapping):
            return cls.from_mapping(data)
        if dataclasses.is_dataclass(data) and not isinstance(data, type):
            return cls.from_dataclass(data)
        raise TypeError(f"Cannot build an UpdateInput from {type(data).__name__}")


__all__ = ["FieldState", "FieldValue", "UpdateInput"]
