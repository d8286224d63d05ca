from __future__ import annotations

import threading

import pytest

from src.hr_records.hr_records.core.constants import COUNTERS
from src.hr_records.hr_records.core.exceptions import ConfigurationError, ConflictError
from src.hr_records.hr_records.counters.service import SequentialIdGenerator


def test_first_ids_are_zero_padded_and_increasing(store):
    ids = SequentialIdGenerator(store)

    assert ids.reserve_next_id("employee") == "EMP001"
    assert ids.reserve_next_id("employee") == "EMP002"
    assert ids.reserve_next_id("salary") == "SAL001"

    counter = store.get(COUNTERS, "employee")
    assert counter["lastNumber"] == 2
    assert counter["lastId"] == "EMP002"


def test_padding_grows_past_width(store):
    store.set(COUNTERS, "employee", {"lastNumber": 999, "lastId": "EMP999"})
    ids = SequentialIdGenerator(store)

    assert ids.reserve_next_id("employee") == "EMP1000"


def test_preview_does_not_reserve(store):
    ids = SequentialIdGenerator(store)
    ids.reserve_next_id("employment")

    assert ids.preview_next_id("employment") == "EMT002"
    assert ids.preview_next_id("employment") == "EMT002"
    assert ids.get_counter("employment").last_number == 1


def test_unknown_entity_type_is_a_configuration_error(store):
    ids = SequentialIdGenerator(store)

    with pytest.raises(ConfigurationError):
        ids.reserve_next_id("department")


def test_custom_formats(store):
    ids = SequentialIdGenerator(store, {"employee": ("E-", 5)})

    assert ids.reserve_next_id("employee") == "E-00001"


def test_reserve_unused_id_skips_taken_codes(store):
    ids = SequentialIdGenerator(store)
    taken = {"EMP001", "EMP002"}

    assert ids.reserve_unused_id("employee", taken.__contains__) == "EMP003"
    assert ids.get_counter("employee").last_number == 3


def test_reserve_unused_id_gives_up(store):
    ids = SequentialIdGenerator(store)

    with pytest.raises(ConflictError):
        ids.reserve_unused_id("employee", lambda code: True, max_attempts=3)

    assert ids.get_counter("employee").last_number == 3


def test_concurrent_reservations_are_distinct_and_contiguous(store):
    ids = SequentialIdGenerator(store)
    results = []
    lock = threading.Lock()

    def worker():
        for _ in range(10):
            value = ids.reserve_next_id("employee")
            with lock:
                results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 80
    assert len(set(results)) == 80
    assert sorted(int(r[3:]) for r in results) == list(range(1, 81))
    assert ids.get_counter("employee").last_id == "EMP080"
