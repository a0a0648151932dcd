"""Validation of create and partial-update inputs.

The merger turns client input into a validated :class:`Patch` (updates) or a
validated value dict (creates). It never writes: callers hand the result to
the store only after validation succeeded, so a rejected input has no effect
on stored state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from relaykit.core.exceptions import (
    FieldNotUpdatableError,
    MissingRequiredFieldError,
    NullNotAllowedError,
    UnknownFieldError,
)
from relaykit.core.mutations.values import FieldState, UpdateInput

if TYPE_CHECKING:
    from relaykit.core.mutations.fields import EntitySchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Patch:
    """Validated set of field changes for one entity.

    Attributes:
        values: Fields to set, with their new values.
        cleared: Fields to set to null.
    """

    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    cleared: frozenset[str] = frozenset()

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(self.values) | self.cleared

    @property
    def is_empty(self) -> bool:
        return not self.values and not self.cleared

    def __contains__(self, name: object) -> bool:
        return name in self.values or name in self.cleared

    def __len__(self) -> int:
        return len(self.values) + len(self.cleared)

    def as_dict(self) -> dict[str, Any]:
        """Flatten to ``{field: value}`` with ``None`` for cleared fields."""
        return {**self.values, **dict.fromkeys(self.cleared)}


def apply_patch(target: Any, patch: Patch) -> Any:
    """Apply a validated patch to a mutable mapping or an object in place."""
    for name, value in patch.as_dict().items():
        if isinstance(target, MutableMapping):
            target[name] = value
        else:
            setattr(target, name, value)
    return target


class PartialUpdateMerger:
    """Validate mutation inputs against an entity's field rules.

    Example:
        merger = PartialUpdateMerger(USER)

        patch = merger.merge({"bio": None, "display_name": "Ada"})
        patch.values    # {"display_name": "Ada"}
        patch.cleared   # frozenset({"bio"})

        merger.merge({"email": None})       # raises NullNotAllowedError
        merger.merge({"created_at": now})   # raises FieldNotUpdatableError

        values = merger.validate_create({"email": "ada@example.com", "display_name": "Ada"})
    """

    def __init__(self, entity: EntitySchema) -> None:
        self.entity = entity

    def merge(self, update: UpdateInput | Mapping[str, Any] | BaseModel | Any) -> Patch:
        """Validate a sparse update and return exactly the fields it names.

        A field explicitly set to its current value is still part of the patch.

        Raises:
            FieldNotUpdatableError: The input names a field outside the update set.
            NullNotAllowedError: An explicit null targets a non-nullable field.
        """
        update_input = UpdateInput.coerce(update)
        values: dict[str, Any] = {}
        cleared: set[str] = set()

        for name, field_value in update_input.items():
            spec = self.entity.spec_for(name)
            if spec is None or not spec.updatable:
                raise FieldNotUpdatableError(name, self.entity.type_name)
            if field_value.state is FieldState.CLEAR:
                if not spec.nullable:
                    raise NullNotAllowedError(name, self.entity.type_name)
                cleared.add(name)
            else:
                values[name] = field_value.value

        patch = Patch(values=MappingProxyType(values), cleared=frozenset(cleared))
        logger.debug(
            "Validated %s update: set=%s cleared=%s",
            self.entity.type_name,
            sorted(values),
            sorted(cleared),
        )
        return patch

    def validate_create(self, data: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
        """Validate a create input.

        Every required field needs a concrete (non-null) value. Optional
        fields may be omitted, and may be null when nullable.

        Raises:
            UnknownFieldError: The input names an undeclared field.
            MissingRequiredFieldError: Required fields are absent (all are listed).
            NullNotAllowedError: A null targets a required or non-nullable field.
        """
        if isinstance(data, BaseModel):
            provided = {name: getattr(data, name) for name in data.model_fields_set}
        else:
            provided = dict(data)

        for name in provided:
            if self.entity.spec_for(name) is None:
                raise UnknownFieldError(name, self.entity.type_name)

        missing = [name for name in self.entity.required_fields if name not in provided]
        if missing:
            raise MissingRequiredFieldError(missing, self.entity.type_name)

        for name, value in provided.items():
            spec = self.entity.spec_for(name)
            if value is None and (spec.required or not spec.nullable):
                raise NullNotAllowedError(name, self.entity.type_name)

        return provided


__all__ = ["Patch", "PartialUpdateMerger", "apply_patch"]
