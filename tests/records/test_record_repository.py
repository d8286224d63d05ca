from __future__ import annotations

import pytest

from src.hr_records.hr_records.core.exceptions import NotFoundError, ValidationError
from src.hr_records.hr_records.records.model import strip_absent
from src.hr_records.hr_records.records.repository import RecordRepository


@pytest.fixture
def repo(store, clock):
    def no_negative_age(payload):
        if payload.get("age", 0) < 0:
            raise ValidationError("age must be positive")

    return RecordRepository(store, "things", label="Thing", validators=[no_negative_age], clock=clock)


def test_strip_absent_is_recursive():
    assert strip_absent({"a": None, "b": {"c": None, "d": 1}, "e": [None, 2]}) == {"b": {"d": 1}, "e": [2]}


def test_create_stamps_audit_fields(repo, admin_ctx, clock):
    created = repo.create(admin_ctx, {"name": "x", "note": None})

    assert "note" not in created
    assert created["createdBy"] == admin_ctx.principal_id
    assert created["createdAt"] == created["updatedAt"] == clock.now.isoformat(timespec="seconds")


def test_update_merges_and_keeps_creation_stamps(repo, admin_ctx, ctx_for, clock):
    created = repo.create(admin_ctx, {"name": "x", "colour": "red"})
    clock.advance(hours=1)
    editor = ctx_for({"id": "emp-1", "name": "Editor"})

    updated = repo.update(editor, created["id"], {"colour": None, "size": 3, "createdBy": "forged"})

    assert updated["colour"] == "red"
    assert updated["size"] == 3
    assert updated["createdBy"] == admin_ctx.principal_id
    assert updated["updatedBy"] == "emp-1"
    assert updated["updatedAt"] != updated["createdAt"]


def test_replace_removes_keys(repo, admin_ctx):
    created = repo.create(admin_ctx, {"name": "x", "legacy": True})

    replaced = repo.replace(admin_ctx, created["id"], {"name": "y"})

    assert "legacy" not in replaced
    assert replaced["createdAt"] == created["createdAt"]


def test_validators_run_on_every_write(repo, admin_ctx):
    with pytest.raises(ValidationError):
        repo.create(admin_ctx, {"age": -1})


def test_require_names_the_record_type(repo):
    with pytest.raises(NotFoundError) as exc:
        repo.require("missing")

    assert str(exc.value) == "Thing not found"
