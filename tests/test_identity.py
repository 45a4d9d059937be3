from frontdesk.core.config import settings
from frontdesk.models import Party, User
from frontdesk.schemas.registration import PatientRegistrationIn
from frontdesk.services import identity as identity_service
from frontdesk.services.identity import create_party, link_identity


def _data(**kw):
    return PatientRegistrationIn(first_name="Anitha", last_name="Kumar", phone="9876543210", **kw)


def test_link_identity_creates_patient_user(db):
    user = link_identity(db, "handle-1", "AH2510-0001", _data())

    assert user.id
    assert user.role == "patient"
    assert user.employee_id == "AH2510-0001"
    assert user.email == "AH2510-0001@annam.com"
    assert user.auth_id == "handle-1"
    assert user.name == "Anitha Kumar"
    assert user.permissions["view_own_records"] is True


def test_login_email_used_even_with_contact_email(db):
    user = link_identity(db, None, "AH2510-0001", _data(email="anitha@example.com"))

    assert user.email == "AH2510-0001@annam.com"


def test_link_identity_is_idempotent(db):
    first = link_identity(db, "handle-1", "AH2510-0001", _data())
    second = link_identity(db, "handle-1", "AH2510-0001", _data())

    assert second.id == first.id
    assert db.query(User).count() == 1


def test_link_identity_without_auth_handle(db):
    user = link_identity(db, None, "AH2510-0001", _data())

    assert user.auth_id is None


def test_create_party(db):
    party = create_party(db, "AH2510-0001", _data())

    assert party is not None
    assert party.external_ref == "AH2510-0001"
    assert party.display_name == "Anitha Kumar"
    assert party.party_type == "patient"


def test_create_party_is_idempotent(db):
    first = create_party(db, "AH2510-0001", _data())
    second = create_party(db, "AH2510-0001", _data())

    assert second.id == first.id
    assert db.query(Party).count() == 1


def test_party_disabled(db, monkeypatch):
    monkeypatch.setattr(settings, "PARTY_ENABLED", False)

    assert create_party(db, "AH2510-0001", _data()) is None
    assert db.query(Party).count() == 0


def test_party_skipped_without_table(db, monkeypatch):
    monkeypatch.setattr(identity_service, "party_table_exists", lambda db: False)

    assert create_party(db, "AH2510-0001", _data()) is None


def test_user_carries_party_link(db):
    party = create_party(db, "AH2510-0001", _data())
    user = link_identity(db, None, "AH2510-0001", _data(), party.id)

    assert user.party_id == party.id


def _miss_first_lookup(monkeypatch, module, name):
    """The existence check misses once, as when a concurrent request wins the insert."""
    real = getattr(module, name)
    calls = []

    def _lookup(*args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            return None
        return real(*args, **kwargs)

    monkeypatch.setattr(module, name, _lookup)
    return calls


def test_link_identity_recovers_from_duplicate_key(db, monkeypatch):
    first = link_identity(db, "handle-1", "AH2510-0001", _data())
    calls = _miss_first_lookup(monkeypatch, identity_service, "find_user_by_email_or_employee_id")

    second = link_identity(db, "handle-1", "AH2510-0001", _data())

    assert len(calls) == 2
    assert second.id == first.id
    assert db.query(User).count() == 1


def test_existing_user_gets_missing_auth_handle(db):
    first = link_identity(db, None, "AH2510-0001", _data())

    second = link_identity(db, "handle-2", "AH2510-0001", _data())

    assert second.id == first.id
    assert second.auth_id == "handle-2"
    assert db.query(User).one().auth_id == "handle-2"


def test_existing_auth_handle_is_kept(db):
    link_identity(db, "handle-1", "AH2510-0001", _data())

    user = link_identity(db, "handle-2", "AH2510-0001", _data())

    assert user.auth_id == "handle-1"
