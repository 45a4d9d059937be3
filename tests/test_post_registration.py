from datetime import date, datetime

from frontdesk.services.post_registration import initial_appointment_slot, outpatient_slot


def test_outpatient_slot_same_day_before_nine():
    assert outpatient_slot(datetime(2025, 10, 14, 8, 15)) == (date(2025, 10, 14), "09:00:00")


def test_outpatient_slot_at_nine_is_still_today():
    assert outpatient_slot(datetime(2025, 10, 14, 9, 0)) == (date(2025, 10, 14), "09:00:00")


def test_outpatient_slot_after_nine_moves_to_tomorrow():
    assert outpatient_slot(datetime(2025, 10, 14, 9, 0, 1)) == (date(2025, 10, 15), "09:00:00")


def test_outpatient_slot_crosses_month_end():
    assert outpatient_slot(datetime(2025, 10, 31, 17, 0)) == (date(2025, 11, 1), "09:00:00")


def test_initial_appointment_is_next_day():
    assert initial_appointment_slot(datetime(2025, 10, 14, 8, 0)) == (date(2025, 10, 15), "09:00:00")
