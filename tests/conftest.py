import os

# must be set before frontdesk.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_SCHEME"] = "pbkdf2_sha256"
os.environ["UHID_RETRY_DELAY_MS"] = "0"
os.environ["REGISTRATION_TIMEOUT_SECONDS"] = "0"
os.environ["TIMEZONE"] = "Asia/Kolkata"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from frontdesk import models  # noqa: F401
from frontdesk.crud.crud_patients import insert_patient
from frontdesk.db.base import Base
from frontdesk.db.session import get_db, make_sessionmaker
from frontdesk.models import Doctor, IpdBed
from frontdesk.schemas.registration import PatientRegistrationIn
from frontdesk.services.patient_writer import build_patient


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = make_sessionmaker(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def doctor(db):
    doc = Doctor(name="Dr. Meena Raghavan", specialization="General Medicine")
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return doc


@pytest.fixture
def bed(db):
    b = IpdBed(bed_number="GW-01", room_number="101", bed_type="general")
    db.add(b)
    db.commit()
    db.refresh(b)
    return b


@pytest.fixture
def make_patient(db):
    """Write a patient row directly, bypassing the counter."""

    def _make(uhid: str, **fields):
        return insert_patient(db, build_patient(uhid, PatientRegistrationIn(**fields), None))

    return _make


@pytest.fixture
def client(engine):
    from fastapi.testclient import TestClient

    from frontdesk.main import app

    TestingSession = make_sessionmaker(engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
