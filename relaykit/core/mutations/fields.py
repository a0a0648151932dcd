"""Field metadata for mutation validation.

An :class:`EntitySchema` lists, per entity type, which fields exist, which
accept null, which a create input must provide, and which an update may touch.
"""

from __future__ import annotations

import types
import typing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pydantic import BaseModel


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Validation rules for one entity field.

    Attributes:
        name: Field name as it appears in inputs.
        nullable: Whether the field may be set to null.
        required: Whether a create input must provide a concrete value.
        updatable: Whether an update input may change the field.
    """

    name: str
    nullable: bool = True
    required: bool = False
    updatable: bool = True


def _allows_none(annotation: Any) -> bool:
    if annotation is None or annotation is type(None) or annotation is Any:
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return any(_allows_none(arg) for arg in typing.get_args(annotation))
    if origin is typing.Annotated:
        return _allows_none(typing.get_args(annotation)[0])
    return False


@dataclass(frozen=True)
class EntitySchema:
    """Field rules for an entity type.

    Example:
        USER = EntitySchema(
            "User",
            (
                FieldSpec("email", nullable=False, required=True),
                FieldSpec("display_name", required=True, nullable=False),
                FieldSpec("bio"),
                FieldSpec("created_at", nullable=False, updatable=False),
            ),
        )
    """

    type_name: str
    fields: tuple[FieldSpec, ...]
    _index: dict[str, FieldSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, FieldSpec] = {}
        for spec in self.fields:
            if spec.name in index:
                raise ValueError(f"Duplicate field '{spec.name}' in {self.type_name}")
            index[spec.name] = spec
        object.__setattr__(self, "_index", index)

    def spec_for(self, name: str) -> FieldSpec | None:
        return self._index.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._index)

    @property
    def updatable_fields(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self.fields if spec.updatable)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    @classmethod
    def from_model(
        cls,
        model: type[BaseModel],
        *,
        type_name: str | None = None,
        read_only: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> EntitySchema:
        """Derive field rules from a pydantic model.

        A field is nullable when its annotation admits ``None`` and required
        when pydantic marks it required. Fields in ``read_only`` are excluded
        from the update set.
        """
        frozen = set(read_only)
        skipped = set(exclude)
        specs = tuple(
            FieldSpec(
                name=name,
                nullable=_allows_none(info.annotation),
                required=info.is_required(),
                updatable=name not in frozen,
            )
            for name, info in model.model_fields.items()
            if name not in skipped
        )
        return cls(type_name or model.__name__, specs)


__all__ = ["EntitySchema", "FieldSpec"]
