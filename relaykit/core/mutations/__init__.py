"""Create and partial-update input validation."""

from relaykit.core.mutations.fields import EntitySchema, FieldSpec
from relaykit.core.mutations.merger import Patch, PartialUpdateMerger, apply_patch
from relaykit.core.mutations.values import FieldState, FieldValue, UpdateInput

__all__ = [
    "EntitySchema",
    "FieldSpec",
    "FieldState",
    "FieldValue",
    "Patch",
    "PartialUpdateMerger",
    "UpdateInput",
    "apply_patch",
]
