from frontdesk.models import AuthIdentity
from frontdesk.services import credentials as credentials_service
from frontdesk.services.auth_identity import sign_in, verify_password
from frontdesk.services.credentials import issue_credentials


def test_issue_credentials_creates_identity(db):
    creds = issue_credentials(db, "AH2510-0001")

    assert creds.email == "AH2510-0001@annam.com"
    assert creds.password == "password"
    assert creds.auth_id
    assert sign_in(db, creds.email, creds.password) == creds.auth_id


def test_password_is_stored_hashed(db):
    creds = issue_credentials(db, "AH2510-0001")
    ident = db.query(AuthIdentity).filter_by(email=creds.email).one()

    assert ident.password_hash != "password"
    assert verify_password("password", ident.password_hash)
    assert ident.uhid == "AH2510-0001"
    assert ident.role == "patient"


def test_issue_credentials_reuses_existing_identity(db):
    first = issue_credentials(db, "AH2510-0001")
    second = issue_credentials(db, "AH2510-0001")

    assert second.auth_id == first.auth_id
    assert db.query(AuthIdentity).count() == 1


def test_existing_identity_recovered_by_sign_in(db, monkeypatch):
    first = issue_credentials(db, "AH2510-0001")
    # lookup misses, so the create hits the unique email and must recover
    monkeypatch.setattr(credentials_service, "get_identity_by_email", lambda db, email: None)

    second = issue_credentials(db, "AH2510-0001")

    assert second.auth_id == first.auth_id
    assert db.query(AuthIdentity).count() == 1


def test_identity_failure_still_returns_credentials(db, monkeypatch):
    def _down(*args, **kwargs):
        raise RuntimeError("identity store unavailable")

    monkeypatch.setattr(credentials_service, "create_auth_identity", _down)

    creds = issue_credentials(db, "AH2510-0001")

    assert creds.email == "AH2510-0001@annam.com"
    assert creds.password == "password"
    assert creds.auth_id is None


def test_sign_in_rejects_wrong_password(db):
    creds = issue_credentials(db, "AH2510-0001")

    assert sign_in(db, creds.email, "not-the-password") is None
    assert sign_in(db, "nobody@annam.com", "password") is None


def test_handle_recovered_from_user_row_when_sign_in_fails(db, monkeypatch):
    from frontdesk.services.auth_identity import create_auth_identity
    from frontdesk.services.identity import link_identity
    from frontdesk.schemas.registration import PatientRegistrationIn

    # identity exists but with a password the initial one no longer matches
    handle = create_auth_identity(db, "AH2510-0001@annam.com", "changed-by-patient",
                                  uhid="AH2510-0001")
    link_identity(db, handle, "AH2510-0001", PatientRegistrationIn())
    monkeypatch.setattr(credentials_service, "get_identity_by_email", lambda db, email: None)

    creds = issue_credentials(db, "AH2510-0001")

    assert sign_in(db, creds.email, creds.password) is None
    assert creds.auth_id == handle
    assert db.query(AuthIdentity).count() == 1


def test_unrecoverable_handle_comes_back_empty(db, monkeypatch):
    from frontdesk.services.auth_identity import create_auth_identity

    create_auth_identity(db, "AH2510-0001@annam.com", "changed-by-patient", uhid="AH2510-0001")
    monkeypatch.setattr(credentials_service, "get_identity_by_email", lambda db, email: None)

    creds = issue_credentials(db, "AH2510-0001")

    assert creds.email == "AH2510-0001@annam.com"
    assert creds.auth_id is None
