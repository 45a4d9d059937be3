from frontdesk.models import NumberSeries
from frontdesk.services.number_series import next_sequence, peek_sequence


def test_sequence_counts_up_per_period(db):
    assert next_sequence(db, "APT", "20251014") == 1
    assert next_sequence(db, "APT", "20251014") == 2
    assert next_sequence(db, "APT", "20251015") == 1
    db.commit()

    assert db.query(NumberSeries).count() == 2


def test_seed_starts_after_highest_existing(db):
    assert next_sequence(db, "UHID", "2510", seed=lambda: 41) == 42
    # seed is only consulted when the row is created
    assert next_sequence(db, "UHID", "2510", seed=lambda: 500) == 43


def test_peek_does_not_reserve(db):
    assert peek_sequence(db, "OPQ", "20251014") == 1
    assert peek_sequence(db, "OPQ", "20251014") == 1
    assert next_sequence(db, "OPQ", "20251014") == 1
    db.commit()
    assert peek_sequence(db, "OPQ", "20251014") == 2
