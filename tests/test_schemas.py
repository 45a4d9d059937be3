import pytest
from pydantic import ValidationError

from frontdesk.schemas.registration import PatientRegistrationIn


@pytest.mark.parametrize("value", ["09:30", "23:59:59", "00:00"])
def test_admission_time_accepts_clock_times(value):
    assert PatientRegistrationIn(admission_time=value).admission_time == value


@pytest.mark.parametrize("value", ["25:61", "12:60", "10:30:75", "half past nine", "10"])
def test_admission_time_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        PatientRegistrationIn(admission_time=value)


def test_blank_admission_time_is_none():
    assert PatientRegistrationIn(admission_time="").admission_time is None


def test_gender_is_lowercased():
    assert PatientRegistrationIn(gender=" Male ").gender == "male"
