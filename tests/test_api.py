from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fakes import ANNUAL

CHECK_IN_AT = datetime(2024, 6, 3, 2, 0, tzinfo=timezone.utc)  # 09:00 in Phnom Penh
CHECK_OUT_AT = datetime(2024, 6, 3, 10, 0, tzinfo=timezone.utc)  # 17:00 in Phnom Penh


@pytest.fixture
def clock(monkeypatch):
    current = {"now": CHECK_IN_AT}
    monkeypatch.setattr("hr_system.attendance.controller.now_utc", lambda: current["now"])
    return current


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": {"status": "healthy"}}


def test_login_and_me(client, login):
    login("dara")
    me = client.get("/api/auth/me").get_json()["data"]
    assert me == {"user_id": 1, "employee_id": 1, "role": "employee"}

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


@pytest.mark.parametrize("username,password", [("dara", "wrong"), ("nobody", "secret"), ("gone", "secret")])
def test_login_refused(client, username, password):
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "AUTH_REQUIRED"


@pytest.mark.parametrize("body", [{"username": 5, "password": "secret"}, {"username": "dara"}, None])
def test_login_body_is_validated(client, body):
    resp = client.post("/api/auth/login", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_requires_login(client):
    resp = client.get("/api/attendance")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_unknown_route_uses_json_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_check_in_and_out(client, login, clock):
    login("dara")
    assert client.get("/api/attendance/today").get_json()["data"] == {"work_date": "2024-06-03", "record": None}

    resp = client.post("/api/attendance/check-in", json={"latitude": 11.55, "longitude": 104.92})
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["attendance_status"] == "late"
    assert data["work_date"] == "2024-06-03"
    assert data["check_in_location"] == {"lat": 11.55, "lng": 104.92}

    again = client.post("/api/attendance/check-in", json={})
    assert again.status_code == 409
    assert again.get_json()["code"] == "DUPLICATE_CHECK_IN"

    clock["now"] = CHECK_OUT_AT
    resp = client.post("/api/attendance/check-out", json={})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["work_hours"] == 8.0
    today = client.get("/api/attendance/today").get_json()["data"]
    assert today["record"]["check_out_time"] is not None

    report = client.get("/api/attendance/report?start_date=2024-06-01&end_date=2024-06-30").get_json()["data"]
    assert report["statistics"]["late_count"] == 1
    assert report["statistics"]["attendance_rate"] == 100


def test_check_out_without_check_in(client, login, clock):
    login("dara")
    resp = client.post("/api/attendance/check-out", json={})
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "NO_CHECK_IN"


def test_bad_coordinates_are_rejected(client, login, clock):
    login("dara")
    resp = client.post("/api/attendance/check-in", json={"latitude": 123, "longitude": 0})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_mark_absences_requires_hr_or_admin(client, login, clock):
    login("dara")
    assert client.post("/api/attendance/mark-absences", json={}).status_code == 403

    login("admin")
    resp = client.post("/api/attendance/mark-absences", json={"work_date": "2024-06-03"})
    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"work_date": "2024-06-03", "created": 3}
    assert client.post("/api/attendance/mark-absences", json={"work_date": "2024-06-03"}).get_json()["data"]["created"] == 0


def test_employee_cannot_list_other_employees_records(client, login):
    login("dara")
    assert client.get("/api/attendance?employee_id=2").status_code == 403
    assert client.get("/api/attendance").status_code == 200


def test_employee_account_without_profile_sees_nothing(client, login, container):
    container.payroll_service.generate_payroll("2024-05")
    login("fresh")

    for url in (
        "/api/payroll",
        "/api/attendance",
        "/api/attendance/report?start_date=2024-06-01&end_date=2024-06-30",
        "/api/leave",
    ):
        resp = client.get(url)
        assert resp.status_code == 403, url
        assert resp.get_json()["code"] == "FORBIDDEN"


def test_leave_workflow(client, login, leave_repo):
    leave_repo.set_balance(1, ANNUAL, 2099, quota=5)
    login("dara")

    resp = client.post(
        "/api/leave",
        json={"leave_type_id": ANNUAL, "start_date": "2099-01-10", "end_date": "2099-01-12", "reason": "Trip"},
    )
    assert resp.status_code == 201
    request_id = resp.get_json()["data"]["request_id"]

    assert client.put(f"/api/leave/{request_id}/approve").status_code == 403

    login("sophea")
    resp = client.put(f"/api/leave/{request_id}/approve")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["leave_status"] == "approved"

    login("dara")
    balances = client.get("/api/leave/balance?year=2099").get_json()["data"]
    assert balances[0]["remaining_days"] == 2

    resp = client.post(
        "/api/leave",
        json={"leave_type_id": ANNUAL, "start_date": "2099-01-15", "end_date": "2099-01-17", "reason": "Again"},
    )
    assert resp.status_code == 422
    assert resp.get_json()["code"] == "INSUFFICIENT_BALANCE"

    resp = client.delete(f"/api/leave/{request_id}")
    assert resp.status_code == 200
    assert client.get("/api/leave/balance?year=2099").get_json()["data"][0]["remaining_days"] == 5


def test_leave_validation_and_visibility(client, login):
    login("dara")
    resp = client.post("/api/leave", json={"leave_type_id": ANNUAL})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"

    login("vanna")
    resp = client.post(
        "/api/leave",
        json={"leave_type_id": ANNUAL, "start_date": "2099-02-01", "end_date": "2099-02-01", "reason": "Errand"},
    )
    request_id = resp.get_json()["data"]["request_id"]

    login("dara")
    assert client.get(f"/api/leave/{request_id}").status_code == 403
    assert client.delete(f"/api/leave/{request_id}").status_code == 404

    types = client.get("/api/leave-types").get_json()["data"]
    assert {t["leave_type_name"] for t in types} == {"Annual", "Sick"}


def test_payroll_endpoints(client, login):
    login("dara")
    assert client.post("/api/payroll", json={"payroll_month": "2024-05"}).status_code == 403

    login("admin")
    resp = client.post("/api/payroll", json={"payroll_month": "2024-05"})
    assert resp.status_code == 201
    assert len(resp.get_json()["data"]["created"]) == 3

    resp = client.post("/api/payroll", json={"employee_id": 1, "payroll_month": "2024-05", "base_salary": 1}).get_json()
    assert resp["code"] == "VALIDATION_ERROR"

    payroll_id = client.get("/api/payroll?employee_id=1").get_json()["data"][0]["payroll_id"]
    resp = client.put(f"/api/payroll/{payroll_id}", json={"bonuses": 100})
    assert resp.get_json()["data"]["net_salary"] == 1300
    assert client.put(f"/api/payroll/{payroll_id}/approve").get_json()["data"]["payroll_status"] == "approved"
    assert client.delete(f"/api/payroll/{payroll_id}").status_code == 400

    draft_id = client.get("/api/payroll?employee_id=3").get_json()["data"][0]["payroll_id"]
    assert client.delete(f"/api/payroll/{draft_id}").get_json()["success"] is True
    assert client.get(f"/api/payroll/{draft_id}").status_code == 404

    summary = client.get("/api/payroll/summary?payroll_month=2024-05").get_json()["data"]
    assert summary["total_employees"] == 2
    assert summary["total_net_salary"] == 2100
    assert client.get("/api/payroll/summary").status_code == 400

    login("dara")
    assert client.get("/api/payroll/summary?payroll_month=2024-05").status_code == 403
    mine = client.get("/api/payroll").get_json()["data"]
    assert [p["employee_id"] for p in mine] == [1]


def test_reports_require_manager(client, login):
    login("dara")
    assert client.get("/api/reports/headcount").status_code == 403

    login("sophea")
    data = client.get("/api/reports/headcount").get_json()["data"]
    assert data["summary"]["total_employees"] == 3
    assert client.get("/api/reports/payroll?payroll_month=bad").status_code == 400
    assert client.get("/api/reports/attendance?start_date=2024-06-01&end_date=2024-06-30").status_code == 200


def test_employee_and_department_admin(client, login):
    login("sophea")
    assert client.get("/api/employees").status_code == 200
    assert client.post("/api/employees", json={"employee_code": "E010"}).status_code == 403

    login("admin")
    resp = client.post("/api/departments", json={"department_name": "Operations"})
    assert resp.status_code == 201
    department_id = resp.get_json()["data"]["department_id"]

    resp = client.post(
        "/api/employees",
        json={
            "employee_code": "E010",
            "first_name": "Meas",
            "last_name": "Bopha",
            "email": "bopha@acme.com.kh",
            "department_id": department_id,
            "salary_amount": 950,
        },
    )
    assert resp.status_code == 201
    employee_id = resp.get_json()["data"]["employee_id"]

    again = client.post("/api/employees", json={"employee_code": "E010", "first_name": "X", "last_name": "Y"})
    assert again.status_code == 409
    assert again.get_json()["code"] == "CONFLICT"
    bad_email = client.post(
        "/api/employees", json={"employee_code": "E011", "first_name": "X", "last_name": "Y", "email": "nope"}
    )
    assert bad_email.status_code == 400

    resp = client.put(f"/api/employees/{employee_id}", json={"position": "Analyst"})
    assert resp.get_json()["data"]["position"] == "Analyst"

    assert client.delete(f"/api/departments/{department_id}").status_code == 400
    assert client.delete(f"/api/employees/{employee_id}").status_code == 200
    assert client.get(f"/api/employees/{employee_id}").status_code == 404
    assert client.delete(f"/api/departments/{department_id}").status_code == 200

    names = {d["department_name"] for d in client.get("/api/departments").get_json()["data"]}
    assert names == {"Engineering", "Finance"}

    login("dara")
    assert client.get("/api/employees/1").get_json()["data"]["employee_code"] == "E001"
    assert client.get("/api/employees/2").status_code == 403
    assert client.get("/api/employees").status_code == 403
