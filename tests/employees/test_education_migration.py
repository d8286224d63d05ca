from __future__ import annotations

from src.hr_records.hr_records.core.constants import EMPLOYEES
from src.hr_records.hr_records.employees.migration import (
    is_current,
    migrate,
    migrate_for_storage,
    needs_migration,
)

TWELFTH = {"board": "CBSE", "percentage": "82"}
DIPLOMA = {"institute": "Govt Polytechnic", "branch": "Civil"}


def test_diploma_only_yields_single_diploma_entry():
    migrated = migrate({"name": "A", "diploma": DIPLOMA})

    entries = migrated["secondaryEducation"]
    assert len(entries) == 1
    assert entries[0]["type"] == "diploma"
    assert entries[0]["diplomaData"] == DIPLOMA
    assert entries[0]["id"]


def test_both_legacy_objects_yield_two_entries_in_order():
    migrated = migrate({"twelthStandard": TWELFTH, "otherEducation": DIPLOMA})

    assert [e["type"] for e in migrated["secondaryEducation"]] == ["12th", "diploma"]
    assert migrated["secondaryEducation"][0]["twelthData"] == TWELFTH


def test_alternate_twelfth_key_is_recognized():
    migrated = migrate({"12th": TWELFTH})

    assert migrated["secondaryEducation"][0]["type"] == "12th"


def test_read_view_keeps_legacy_keys_and_does_not_touch_input():
    doc = {"twelthStandard": TWELFTH}

    migrated = migrate(doc)

    assert "twelthStandard" in migrated
    assert "secondaryEducation" not in doc


def test_existing_array_wins_over_legacy_keys():
    doc = {"secondaryEducation": [], "diploma": DIPLOMA}

    assert not needs_migration(doc)
    assert migrate(doc)["secondaryEducation"] == []


def test_migrate_is_idempotent():
    once = migrate({"diploma": DIPLOMA})

    assert migrate(once) == once


def test_storage_shape_drops_legacy_keys():
    stored = migrate_for_storage({"twelthStandard": TWELFTH, "diploma": DIPLOMA})

    assert "twelthStandard" not in stored and "diploma" not in stored
    assert stored["schemaVersion"] == 2
    assert len(stored["secondaryEducation"]) == 2
    assert is_current(stored)


def test_empty_legacy_objects_are_ignored():
    assert not needs_migration({"twelthStandard": {}, "diploma": None})


def test_read_path_presents_migrated_shape(container, store, admin_ctx):
    employee_id = store.add(EMPLOYEES, {"name": "Legacy", "phone": "9811111111", "status": "active", "diploma": DIPLOMA})

    record = container.employee_service.get_employee(admin_ctx, employee_id)

    assert record["secondaryEducation"][0]["diplomaData"] == DIPLOMA
    assert "secondaryEducation" not in store.get(EMPLOYEES, employee_id)


def test_update_persists_migrated_shape(container, store, admin_ctx):
    employee_id = store.add(EMPLOYEES, {"name": "Legacy", "phone": "9811111111", "status": "active", "diploma": DIPLOMA})

    container.employee_service.update_employee(admin_ctx, employee_id, {"city": "Pune"})

    stored = store.get(EMPLOYEES, employee_id)
    assert "diploma" not in stored
    assert stored["secondaryEducation"][0]["diplomaData"] == DIPLOMA
    assert stored["schemaVersion"] == 2


def test_migrate_all_rewrites_only_legacy_records(container, store, admin_ctx, make_employee):
    make_employee()
    store.add(EMPLOYEES, {"name": "L1", "phone": "9811111111", "twelthStandard": TWELFTH})
    store.add(EMPLOYEES, {"name": "L2", "phone": "9811111112", "diploma": DIPLOMA})

    assert container.employee_service.migrate_all(admin_ctx) == 2
    assert container.employee_service.migrate_all(admin_ctx) == 0
    assert all(is_current(doc) for doc in store.list_all(EMPLOYEES))
