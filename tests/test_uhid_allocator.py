from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from frontdesk.core.config import settings
from frontdesk.db.base import Base
from frontdesk.db.session import make_engine, make_sessionmaker
from frontdesk.services import uhid as uhid_service
from frontdesk.services.errors import UhidAllocationExhausted, UhidCapacityExceeded
from frontdesk.services.uhid import (
    allocate_uhid,
    is_valid_uhid,
    preview_next_uhid,
    uhid_prefix,
)

OCT = datetime(2025, 10, 14, 10, 30)


def test_uhid_format():
    assert uhid_prefix(OCT) == "AH2510"
    assert is_valid_uhid("AH2510-0001")
    assert not is_valid_uhid("AH2510-001")
    assert not is_valid_uhid("XX2510-0001")


def test_first_allocation_of_month(db):
    uhid = allocate_uhid(db, OCT)

    assert uhid == "AH2510-0001"
    assert is_valid_uhid(uhid)


def test_allocations_are_sequential(db):
    assert [allocate_uhid(db, OCT) for _ in range(3)] == [
        "AH2510-0001",
        "AH2510-0002",
        "AH2510-0003",
    ]


def test_counter_resets_monthly(db):
    allocate_uhid(db, datetime(2025, 10, 31, 12, 0))
    last_oct = allocate_uhid(db, datetime(2025, 10, 31, 23, 59, 59))
    first_nov = allocate_uhid(db, datetime(2025, 11, 1, 0, 0, 0))

    assert last_oct.startswith("AH2510-")
    assert first_nov == "AH2511-0001"


def test_aware_time_uses_hospital_clock(db):
    # 20:00 UTC on Oct 31 is 01:30 Nov 1 in Asia/Kolkata
    uhid = allocate_uhid(db, datetime(2025, 10, 31, 20, 0, tzinfo=timezone.utc))

    assert uhid == "AH2511-0001"


def test_counter_starts_after_existing_patients(db, make_patient):
    make_patient("AH2510-0041")

    assert allocate_uhid(db, OCT) == "AH2510-0042"


def test_capacity_exceeded_at_9999(db, make_patient):
    make_patient("AH2510-9999")

    with pytest.raises(UhidCapacityExceeded):
        allocate_uhid(db, OCT)


def test_taken_number_is_skipped(db, make_patient):
    assert allocate_uhid(db, OCT) == "AH2510-0001"
    # written with a caller-supplied UHID, never drawn from the counter
    make_patient("AH2510-0002")

    assert allocate_uhid(db, OCT) == "AH2510-0003"


def test_allocation_exhausted_after_max_attempts(db, monkeypatch):
    monkeypatch.setattr(settings, "UHID_MAX_ATTEMPTS", 3)
    monkeypatch.setattr(uhid_service, "uhid_exists", lambda db, uhid: True)

    with pytest.raises(UhidAllocationExhausted) as exc_info:
        allocate_uhid(db, OCT)

    assert exc_info.value.attempts == 3


def test_preview_reserves_nothing(db):
    assert preview_next_uhid(db, OCT) == "AH2510-0001"
    assert preview_next_uhid(db, OCT) == "AH2510-0001"
    assert allocate_uhid(db, OCT) == "AH2510-0001"
    assert preview_next_uhid(db, OCT) == "AH2510-0002"


def test_concurrent_allocations_are_unique(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'uhid.db'}")
    Base.metadata.create_all(bind=eng)
    Session = make_sessionmaker(eng)

    def _allocate(_):
        session = Session()
        try:
            return [allocate_uhid(session, OCT) for _ in range(5)]
        finally:
            session.close()

    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            batches = list(pool.map(_allocate, range(8)))
    finally:
        eng.dispose()

    uhids = [u for batch in batches for u in batch]
    assert len(uhids) == 40
    assert len(set(uhids)) == 40
    assert sorted(uhids) == [f"AH2510-{n:04d}" for n in range(1, 41)]
