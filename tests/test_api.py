from frontdesk.models import Patient
from frontdesk.services.uhid import format_uhid, is_valid_uhid, uhid_prefix


def test_health(client):
    r = client.get("/")

    assert r.status_code == 200
    assert r.json()["version"] == "v1"


def test_reserve_uhid(client):
    r = client.post("/api/patients/uhid")

    assert r.status_code == 201
    body = r.json()
    assert body["ok"] is True
    assert is_valid_uhid(body["data"]["uhid"])


def test_preview_matches_next_reservation(client):
    preview = client.get("/api/patients/uhid/preview").json()["data"]["uhid"]
    reserved = client.post("/api/patients/uhid").json()["data"]["uhid"]

    assert preview == reserved


def test_register_patient(client):
    r = client.post(
        "/api/patients/register",
        json={
            "first_name": "Meera",
            "last_name": "Iyer",
            "gender": "Female",
            "phone": "9000000001",
            "admission_type": "opd",
        },
    )

    assert r.status_code == 201
    data = r.json()["data"]
    assert data["success"] is True
    assert is_valid_uhid(data["uhid"])
    assert data["patient"]["name"] == "Meera Iyer"
    assert data["patient"]["admission_type"] == "outpatient"
    assert data["credentials"] == {
        "email": f"{data['uhid']}@annam.com",
        "password": "password",
    }
    assert any(s["step"] == "write_patient" and s["ok"] for s in data["steps"])


def test_register_with_reserved_uhid(client):
    uhid = client.post("/api/patients/uhid").json()["data"]["uhid"]

    r = client.post("/api/patients/register", json={"uhid": uhid, "first_name": "Arun"})

    assert r.status_code == 201
    assert r.json()["data"]["uhid"] == uhid


def test_register_then_fetch(client):
    uhid = client.post("/api/patients/register", json={}).json()["data"]["uhid"]

    r = client.get(f"/api/patients/{uhid}")

    assert r.status_code == 200
    assert r.json()["data"]["name"] == f"Patient {uhid}"


def test_fetch_unknown_patient(client):
    r = client.get("/api/patients/AH0000-0000")

    assert r.status_code == 404
    assert r.json() == {
        "ok": False,
        "error": {"msg": "Patient not found", "code": None, "details": None},
    }


def test_invalid_admission_time_is_rejected(client):
    r = client.post("/api/patients/register", json={"admission_time": "half past nine"})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_full_month_reports_errors(client, db, make_patient):
    make_patient(format_uhid(uhid_prefix(), 9999))

    reserve = client.post("/api/patients/uhid")
    register = client.post("/api/patients/register", json={"first_name": "Late"})

    assert reserve.status_code == 409
    assert reserve.json()["error"]["code"] == "UHID_CAPACITY_EXCEEDED"
    assert register.status_code == 400
    assert register.json()["error"]["code"] == "REGISTRATION_FAILED"
    assert db.query(Patient).count() == 1


def test_out_of_range_admission_time_is_rejected(client, db):
    r = client.post("/api/patients/register", json={"admission_time": "25:61"})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    assert db.query(Patient).count() == 0
