"""Unit tests for three-state update values and the partial-update merger."""
from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace

import pytest
import strawberry
from pydantic import BaseModel

from relaykit.core.exceptions import (
    FieldNotUpdatableError,
    MissingRequiredFieldError,
    NullNotAllowedError,
    UnknownFieldError,
)
from relaykit.core.mutations import (
    EntitySchema,
    FieldSpec,
    FieldState,
    FieldValue,
    PartialUpdateMerger,
    Patch,
    UpdateInput,
    apply_patch,
)

USER = EntitySchema(
    "User",
    (
        FieldSpec("email", nullable=False, required=True),
        FieldSpec("display_name", nullable=False, required=True),
        FieldSpec("bio"),
        FieldSpec("website"),
        FieldSpec("created_at", nullable=False, updatable=False),
    ),
)


class UserUpdate(BaseModel):
    display_name: str | None = None
    bio: str | None = None


class UserCreate(BaseModel):
    email: str
    display_name: str
    bio: str | None = None


@strawberry.input
class UserUpdateInput:
    display_name: str | None = strawberry.UNSET
    bio: str | None = strawberry.UNSET


@pytest.fixture
def merger() -> PartialUpdateMerger:
    return PartialUpdateMerger(USER)


@pytest.mark.unit
class TestFieldValue:
    """Tests for the three-state tagged value."""

    def test_of_maps_none_to_clear(self):
        assert FieldValue.of(None).state is FieldState.CLEAR
        assert FieldValue.of("x") == FieldValue.set("x")

    def test_set_requires_a_value(self):
        with pytest.raises(ValueError):
            FieldValue.set(None)

    def test_clear_and_absent_carry_no_payload(self):
        with pytest.raises(ValueError):
            FieldValue(FieldState.CLEAR, "x")
        assert FieldValue.absent().is_present is False


@pytest.mark.unit
class TestUpdateInput:
    """Tests for UpdateInput construction."""

    def test_from_mapping(self):
        update = UpdateInput.from_mapping({"bio": None, "display_name": "Ada"})

        assert update.state_of("bio") is FieldState.CLEAR
        assert update.state_of("display_name") is FieldState.SET
        assert update.state_of("website") is FieldState.ABSENT
        assert set(update) == {"bio", "display_name"}

    def test_from_model_uses_fields_set(self):
        """Fields the client did not send stay absent despite model defaults."""
        update = UpdateInput.from_model(UserUpdate(bio=None))

        assert update.state_of("bio") is FieldState.CLEAR
        assert update.state_of("display_name") is FieldState.ABSENT

    def test_absent_values_are_dropped(self):
        update = UpdateInput({"bio": FieldValue.absent(), "website": FieldValue.set("x")})

        assert list(update) == ["website"]

    def test_from_mapping_keeps_tagged_values(self):
        update = UpdateInput.from_mapping(
            {"bio": FieldValue.clear(), "display_name": "Ada", "website": strawberry.UNSET}
        )

        assert update["bio"] is FieldValue.clear()
        assert update["display_name"] == FieldValue.set("Ada")
        assert update.state_of("website") is FieldState.ABSENT

    def test_coerce_rejects_other_types(self):
        with pytest.raises(TypeError):
            UpdateInput.coerce(["bio"])  # type: ignore[arg-type]


@pytest.mark.unit
class TestMerge:
    """Tests for PartialUpdateMerger.merge."""

    def test_empty_update_gives_empty_patch(self, merger: PartialUpdateMerger):
        patch = merger.merge({})

        assert patch.is_empty
        assert len(patch) == 0

    def test_patch_contains_exactly_present_fields(self, merger: PartialUpdateMerger):
        patch = merger.merge({"display_name": "Ada", "bio": None})

        assert dict(patch.values) == {"display_name": "Ada"}
        assert patch.cleared == frozenset({"bio"})
        assert patch.fields == frozenset({"display_name", "bio"})
        assert "website" not in patch

    def test_null_on_nullable_field_clears(self, merger: PartialUpdateMerger):
        assert merger.merge({"website": None}).as_dict() == {"website": None}

    def test_null_on_non_nullable_field_rejected(self, merger: PartialUpdateMerger):
        with pytest.raises(NullNotAllowedError) as exc_info:
            merger.merge({"email": None})

        assert exc_info.value.code == "NULL_NOT_ALLOWED"

    def test_read_only_field_rejected(self, merger: PartialUpdateMerger):
        with pytest.raises(FieldNotUpdatableError):
            merger.merge({"created_at": datetime.now(UTC)})

    def test_undeclared_field_rejected(self, merger: PartialUpdateMerger):
        with pytest.raises(FieldNotUpdatableError):
            merger.merge({"nickname": "ada"})

    def test_setting_current_value_is_still_included(self, merger: PartialUpdateMerger):
        """No diffing against stored state: an explicit value is always patched."""
        patch = merger.merge({"display_name": "Same"})

        assert patch.values["display_name"] == "Same"

    def test_accepts_pydantic_models(self, merger: PartialUpdateMerger):
        patch = merger.merge(UserUpdate(bio=None))

        assert patch.cleared == frozenset({"bio"})
        assert dict(patch.values) == {}

    def test_mixed_tagged_and_raw_values(self, merger: PartialUpdateMerger):
        patch = merger.merge({"bio": FieldValue.clear(), "display_name": "Ada"})

        assert patch.cleared == frozenset({"bio"})
        assert dict(patch.values) == {"display_name": "Ada"}

        with pytest.raises(NullNotAllowedError):
            merger.merge({"email": FieldValue.clear(), "display_name": "Ada"})

    def test_accepts_strawberry_inputs(self, merger: PartialUpdateMerger):
        patch = merger.merge(UserUpdateInput(display_name="Ada"))

        assert dict(patch.values) == {"display_name": "Ada"}
        assert patch.cleared == frozenset()

        assert merger.merge(UserUpdateInput(bio=None)).cleared == frozenset({"bio"})

    def test_patch_is_read_only(self, merger: PartialUpdateMerger):
        patch = merger.merge({"bio": "hi"})

        with pytest.raises(TypeError):
            patch.values["bio"] = "changed"  # type: ignore[index]


@pytest.mark.unit
class TestValidateCreate:
    """Tests for PartialUpdateMerger.validate_create."""

    def test_valid_create(self, merger: PartialUpdateMerger):
        values = merger.validate_create({"email": "ada@example.com", "display_name": "Ada"})

        assert values == {"email": "ada@example.com", "display_name": "Ada"}

    def test_missing_required_fields_all_listed(self, merger: PartialUpdateMerger):
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            merger.validate_create({"bio": "hi"})

        assert exc_info.value.fields == ["email", "display_name"]

    def test_null_on_required_field_rejected(self, merger: PartialUpdateMerger):
        with pytest.raises(NullNotAllowedError):
            merger.validate_create({"email": None, "display_name": "Ada"})

    def test_null_on_optional_nullable_field_allowed(self, merger: PartialUpdateMerger):
        values = merger.validate_create(
            {"email": "ada@example.com", "display_name": "Ada", "bio": None}
        )

        assert values["bio"] is None

    def test_unknown_field_rejected(self, merger: PartialUpdateMerger):
        with pytest.raises(UnknownFieldError):
            merger.validate_create({"email": "a@b.c", "display_name": "A", "nickname": "x"})

    def test_accepts_pydantic_models(self, merger: PartialUpdateMerger):
        values = merger.validate_create(UserCreate(email="a@b.c", display_name="A"))

        assert values == {"email": "a@b.c", "display_name": "A"}


@pytest.mark.unit
class TestEntitySchemaFromModel:
    """Tests for deriving field rules from pydantic models."""

    def test_from_model(self):
        schema = EntitySchema.from_model(UserCreate, type_name="User", read_only=["email"])

        email = schema.spec_for("email")
        bio = schema.spec_for("bio")

        assert schema.type_name == "User"
        assert (email.nullable, email.required, email.updatable) == (False, True, False)
        assert (bio.nullable, bio.required, bio.updatable) == (True, False, True)
        assert schema.required_fields == ("email", "display_name")

    def test_duplicate_fields_rejected(self):
        with pytest.raises(ValueError):
            EntitySchema("User", (FieldSpec("bio"), FieldSpec("bio")))


@pytest.mark.unit
class TestApplyPatch:
    """Tests for apply_patch."""

    def test_applies_to_mapping_and_object(self, merger: PartialUpdateMerger):
        patch = merger.merge({"display_name": "Ada", "bio": None})
        row = {"display_name": "Old", "bio": "text", "website": "w"}
        obj = SimpleNamespace(display_name="Old", bio="text")

        apply_patch(row, patch)
        apply_patch(obj, patch)

        assert row == {"display_name": "Ada", "bio": None, "website": "w"}
        assert (obj.display_name, obj.bio) == ("Ada", None)

    def test_empty_patch_changes_nothing(self):
        row = {"bio": "text"}

        apply_patch(row, Patch())

        assert row == {"bio": "text"}
