from datetime import datetime

from timerod.extensions import db
from timerod.models import AttendanceRecord, User
from timerod.services import attendance
from conftest import login


def test_requests_without_token_are_rejected(client, seed):
    response = client.get("/api/asistencias")

    assert response.status_code == 401
    assert "error" in response.get_json()


def test_login_is_case_insensitive_and_updates_last_login(client, seed):
    response = client.post("/api/auth/login", json={"email": "ADMIN@acme.test", "password": "secret123"})

    assert response.status_code == 200
    body = response.get_json()
    assert body["token"]
    assert body["user"]["role"] == "Admin"
    assert "passwordHash" not in body["user"]
    assert db.session.get(User, seed.admin_id).last_login_at is not None


def test_login_rejects_bad_password_and_inactive_user(client, seed):
    bad = client.post("/api/auth/login", json={"email": "admin@acme.test", "password": "nope"})
    assert bad.status_code == 401

    db.session.get(User, seed.staff_id).soft_delete()
    db.session.commit()
    inactive = client.post("/api/auth/login", json={"email": "staff@acme.test", "password": "secret123"})
    assert inactive.status_code == 401


def test_verify_returns_claims(client, admin_headers, seed):
    response = client.get("/api/auth/verify", headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json() == {
        "userId": seed.admin_id,
        "email": "admin@acme.test",
        "role": "Admin",
        "companyId": seed.company_id,
        "fullName": "Ana Admin",
    }


def test_logout_revokes_token(client, admin_headers):
    assert client.post("/api/auth/logout", headers=admin_headers).status_code == 200

    response = client.get("/api/auth/verify", headers=admin_headers)
    assert response.status_code == 401
    assert response.get_json() == {"error": "Token has been revoked"}


def test_token_of_deactivated_user_is_rejected(client, staff_headers, seed):
    db.session.get(User, seed.staff_id).soft_delete()
    db.session.commit()

    assert client.get("/api/asistencias", headers=staff_headers).status_code == 401


def test_clock_in_and_out_flow(client, staff_headers, seed):
    entry = client.post("/api/asistencias/entrada", json={"employeeId": seed.employee_id, "notes": "A"},
                        headers=staff_headers)
    assert entry.status_code == 201
    assert entry.get_json()["employeeFullName"] == "Maria Lopez"
    assert entry.get_json()["exitTime"] is None

    again = client.post("/api/asistencias/entrada", json={"employeeId": seed.employee_id}, headers=staff_headers)
    assert again.status_code == 400
    assert again.get_json()["error"] == "Entry already registered today"
    assert again.get_json()["record"]["id"] == entry.get_json()["id"]

    exit_ = client.post("/api/asistencias/salida", json={"employeeId": seed.employee_id, "notes": "B"},
                        headers=staff_headers)
    assert exit_.status_code == 200
    assert exit_.get_json()["notes"] == "A | B"
    assert exit_.get_json()["workedHours"] is not None

    twice = client.post("/api/asistencias/salida", json={"employeeId": seed.employee_id}, headers=staff_headers)
    assert twice.status_code == 400
    assert twice.get_json()["error"] == "Exit already registered today"


def test_clock_in_validation_errors(client, staff_headers, seed):
    missing = client.post("/api/asistencias/entrada", json={}, headers=staff_headers)
    assert missing.status_code == 400

    unknown = client.post("/api/asistencias/entrada", json={"employeeId": 999}, headers=staff_headers)
    assert unknown.status_code == 400
    assert unknown.get_json() == {"error": "Employee not found or inactive"}

    no_entry = client.post("/api/asistencias/salida", json={"employeeId": seed.employee_id}, headers=staff_headers)
    assert no_entry.status_code == 400
    assert no_entry.get_json() == {"error": "No entry record for today"}


def test_clock_in_for_another_company_is_forbidden(client, outsider_headers, seed):
    response = client.post("/api/asistencias/entrada", json={"employeeId": seed.employee_id},
                           headers=outsider_headers)

    assert response.status_code == 403


def test_list_and_get_attendance(client, admin_headers, seed):
    record = attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8))
    attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 4, 8))

    listed = client.get("/api/asistencias?fechaInicio=2025-03-04&fechaFin=2025-03-04", headers=admin_headers)
    assert listed.status_code == 200
    assert [r["date"] for r in listed.get_json()] == ["2025-03-04"]

    by_employee = client.get(f"/api/asistencias/empleado/{seed.employee_id}", headers=admin_headers)
    assert len(by_employee.get_json()) == 2

    single = client.get(f"/api/asistencias/{record.id}", headers=admin_headers)
    assert single.status_code == 200
    assert single.get_json()["date"] == "2025-03-03"

    assert client.get("/api/asistencias/9999", headers=admin_headers).status_code == 404


def test_list_is_scoped_to_own_company_for_non_admins(client, outsider_headers, seed):
    attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8))
    attendance.clock_in(seed.other_employee_id, now=datetime(2025, 3, 3, 8))

    response = client.get("/api/asistencias", headers=outsider_headers)

    assert [r["employeeId"] for r in response.get_json()] == [seed.other_employee_id]


def test_invalid_date_filter(client, admin_headers):
    response = client.get("/api/asistencias?fechaInicio=03/03/2025", headers=admin_headers)

    assert response.status_code == 400


def test_report_endpoint(client, admin_headers, seed):
    attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8))
    attendance.clock_out(seed.employee_id, now=datetime(2025, 3, 3, 16))

    response = client.get(
        f"/api/asistencias/reporte?fechaInicio=2025-03-01&fechaFin=2025-03-31&empresaId={seed.company_id}",
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["totalRecords"] == 1
    assert body["totalWorkedHours"] == 8
    assert body["records"][0]["employee"]["fullName"] == "Maria Lopez"


def test_report_for_foreign_company_is_forbidden(client, staff_headers, seed):
    response = client.get(f"/api/asistencias/reporte?empresaId={seed.other_company_id}", headers=staff_headers)

    assert response.status_code == 403


def test_update_attendance(client, hr_headers, seed):
    record = attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8))

    response = client.put(f"/api/asistencias/{record.id}", headers=hr_headers, json={
        "entryTime": "2025-03-03T08:00:00",
        "exitTime": "2025-03-03T17:30:00",
        "kind": "Overtime",
        "notes": "fixed by HR",
    })

    assert response.status_code == 204
    db.session.expire_all()
    stored = db.session.get(AttendanceRecord, record.id)
    assert float(stored.worked_hours) == 9.5
    assert stored.kind.value == "Overtime"


def test_update_attendance_errors(client, hr_headers, seed):
    record = attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8))

    missing = client.put("/api/asistencias/9999", headers=hr_headers, json={"entryTime": "2025-03-03T08:00:00"})
    assert missing.status_code == 404

    backwards = client.put(f"/api/asistencias/{record.id}", headers=hr_headers, json={
        "entryTime": "2025-03-03T08:00:00",
        "exitTime": "2025-03-03T07:00:00",
    })
    assert backwards.status_code == 400

    bad_kind = client.put(f"/api/asistencias/{record.id}", headers=hr_headers, json={"kind": "Vacation"})
    assert bad_kind.status_code == 400


def test_employee_role_cannot_edit_or_delete(client, staff_headers, seed):
    record = attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8))

    assert client.put(f"/api/asistencias/{record.id}", headers=staff_headers, json={}).status_code == 403
    assert client.delete(f"/api/asistencias/{record.id}", headers=staff_headers).status_code == 403


def test_delete_attendance(client, admin_headers, seed):
    record_id = attendance.clock_in(seed.employee_id, now=datetime(2025, 3, 3, 8)).id

    assert client.delete(f"/api/asistencias/{record_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/asistencias/{record_id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/asistencias/{record_id}", headers=admin_headers).status_code == 404


def test_unexpected_errors_return_detail(app, client, admin_headers, monkeypatch):
    def explode(**kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(attendance, "list_records", explode)

    response = client.get("/api/asistencias", headers=admin_headers)

    assert response.status_code == 500
    assert response.get_json() == {"error": "Unexpected server error", "detalle": "database exploded"}


def test_fractional_employee_id_is_rejected(client, staff_headers, seed):
    response = client.post("/api/asistencias/entrada", json={"employeeId": seed.employee_id + 0.5},
                           headers=staff_headers)

    assert response.status_code == 400
    assert AttendanceRecord.query.count() == 0


def test_date_filter_with_trailing_text_is_rejected(client, admin_headers):
    response = client.get("/api/asistencias?fechaInicio=2025-03-03xyz", headers=admin_headers)

    assert response.status_code == 400
