import pytest

from frontdesk.models import BedAllocation, IpdBed
from frontdesk.services import ipd_beds
from frontdesk.services.errors import ActiveAllocationExists, BedUnavailable
from frontdesk.services.ipd_beds import allocate_bed


@pytest.fixture
def two_beds(db):
    beds = [IpdBed(bed_number="GW-11"), IpdBed(bed_number="GW-12")]
    db.add_all(beds)
    db.commit()
    return beds


def test_allocate_bed_occupies_bed(db, bed, make_patient):
    patient = make_patient("AH2510-0001")

    allocation = allocate_bed(db, patient_id=patient.id, bed_id=bed.id, reason="fever")

    assert allocation.allocation_id.startswith("BA")
    assert allocation.ip_number.startswith("IP")
    assert db.get(IpdBed, bed.id).status == "occupied"


def test_second_allocation_for_patient_is_refused(db, two_beds, make_patient):
    patient = make_patient("AH2510-0001")
    allocate_bed(db, patient_id=patient.id, bed_id=two_beds[0].id)

    with pytest.raises(ActiveAllocationExists):
        allocate_bed(db, patient_id=patient.id, bed_id=two_beds[1].id)


def test_occupied_bed_is_refused(db, bed, make_patient):
    first = make_patient("AH2510-0001")
    second = make_patient("AH2510-0002")
    allocate_bed(db, patient_id=first.id, bed_id=bed.id)

    with pytest.raises(BedUnavailable):
        allocate_bed(db, patient_id=second.id, bed_id=bed.id)


def test_series_rollback_keeps_earlier_reservation(db, two_beds, make_patient, monkeypatch):
    real = ipd_beds.next_sequence

    def _ip_series_collides(db, key, period_key, **kwargs):
        if key == ipd_beds.IP_SERIES_KEY:
            # what next_sequence does after losing a seeding race
            db.rollback()
        return real(db, key, period_key, **kwargs)

    monkeypatch.setattr(ipd_beds, "next_sequence", _ip_series_collides)
    first = make_patient("AH2510-0001")
    second = make_patient("AH2510-0002")

    a = allocate_bed(db, patient_id=first.id, bed_id=two_beds[0].id)
    b = allocate_bed(db, patient_id=second.id, bed_id=two_beds[1].id)

    assert a.allocation_id != b.allocation_id
    assert a.ip_number != b.ip_number
    assert db.query(BedAllocation).count() == 2
