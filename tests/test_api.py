from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

ATTENDANCE = "/api/v1/attendance"
PAYROLL = "/api/v1/payroll"
ADVANCES = "/api/v1/advances"


def check_in(client, staff_id, timestamp="2024-06-03T09:00:00Z"):
    return client.post(f"{ATTENDANCE}/check-in", json={"staff_id": str(staff_id), "timestamp": timestamp})


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_attendance_day_flow(client, staff):
    response = check_in(client, staff.id)
    assert response.status_code == 201
    entry = response.json()
    assert entry["work_date"] == "2024-06-03"
    assert entry["status"] == "present"

    response = client.post(f"{ATTENDANCE}/{entry['id']}/exits",
                           json={"reason": "lunch", "timestamp": "2024-06-03T13:00:00Z"})
    assert response.status_code == 201
    exit_ = response.json()
    assert exit_["end_time"] is None

    response = client.put(f"{ATTENDANCE}/exits/{exit_['id']}/end",
                          json={"timestamp": "2024-06-03T13:30:00Z"})
    assert response.status_code == 200
    assert response.json()["duration_minutes"] == 30

    response = client.post(f"{ATTENDANCE}/{entry['id']}/check-out",
                           json={"timestamp": "2024-06-03T19:00:00Z"})
    assert response.status_code == 200
    body = response.json()
    assert body["total_worked_minutes"] == 570
    assert body["overtime_minutes"] == 30
    assert body["is_complete"] is True
    assert len(body["exits"]) == 1

    fetched = client.get(f"{ATTENDANCE}/{entry['id']}").json()
    assert fetched["check_out"].startswith("2024-06-03T19:00")


def test_double_check_in_returns_conflict(client, staff):
    check_in(client, staff.id)

    response = check_in(client, staff.id, "2024-06-03T10:00:00Z")

    assert response.status_code == 409
    assert response.json()["error"] == "AlreadyCheckedIn"


def test_check_out_with_open_exit(client, staff):
    entry = check_in(client, staff.id).json()
    client.post(f"{ATTENDANCE}/{entry['id']}/exits",
                json={"reason": "bank", "timestamp": "2024-06-03T12:00:00Z"})

    response = client.post(f"{ATTENDANCE}/{entry['id']}/check-out",
                           json={"timestamp": "2024-06-03T18:00:00Z"})

    assert response.status_code == 400
    assert response.json()["error"] == "ExitStillOpen"


def test_out_of_order_timestamps_are_rejected(client, staff):
    entry = check_in(client, staff.id).json()
    exit_ = client.post(f"{ATTENDANCE}/{entry['id']}/exits",
                        json={"reason": "lunch", "timestamp": "2024-06-03T13:00:00Z"}).json()
    client.put(f"{ATTENDANCE}/exits/{exit_['id']}/end", json={"timestamp": "2024-06-03T14:00:00Z"})

    response = client.post(f"{ATTENDANCE}/{entry['id']}/exits",
                           json={"reason": "errand", "timestamp": "2024-06-03T13:30:00Z"})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidTimestamp"

    response = client.post(f"{ATTENDANCE}/{entry['id']}/check-out",
                           json={"timestamp": "2024-06-03T13:30:00Z"})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidTimestamp"

    response = client.post(f"{ATTENDANCE}/{entry['id']}/check-out",
                           json={"timestamp": "2024-06-03T19:00:00Z"})
    assert response.status_code == 200
    assert response.json()["total_worked_minutes"] == 540


def test_exit_without_reason(client, staff):
    entry = check_in(client, staff.id).json()

    response = client.post(f"{ATTENDANCE}/{entry['id']}/exits",
                           json={"reason": "  ", "timestamp": "2024-06-03T12:00:00Z"})

    assert response.status_code == 400
    assert response.json()["error"] == "MissingReason"


def test_unknown_entry_and_staff(client):
    response = client.get(f"{ATTENDANCE}/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"] == "EntryNotFound"

    response = check_in(client, uuid4())
    assert response.status_code == 404
    assert response.json()["error"] == "StaffNotFound"


def test_live_estimate(client, staff):
    started = datetime.now(timezone.utc) - timedelta(hours=2)
    entry = check_in(client, staff.id, started.isoformat()).json()

    response = client.get(f"{ATTENDANCE}/{entry['id']}/live")

    assert response.status_code == 200
    body = response.json()
    assert body["is_final"] is False
    assert 119 <= body["total_worked_minutes"] <= 121


def test_placeholder_and_listing(client, staff):
    response = client.post(f"{ATTENDANCE}/placeholder",
                           json={"staff_id": str(staff.id), "work_date": "2024-06-04", "status": "on_leave"})
    assert response.status_code == 201
    assert response.json()["status"] == "on_leave"

    response = client.post(f"{ATTENDANCE}/placeholder",
                           json={"staff_id": str(staff.id), "work_date": "2024-06-04"})
    assert response.status_code == 409
    assert response.json()["error"] == "EntryAlreadyExists"

    check_in(client, staff.id)
    body = client.get(f"{ATTENDANCE}/", params={"year": 2024, "month": "June"}).json()
    assert body["total"] == 2

    response = client.get(f"{ATTENDANCE}/", params={"year": 2024})
    assert response.status_code == 400


def test_overtime_total(client, staff):
    entry = check_in(client, staff.id).json()
    client.post(f"{ATTENDANCE}/{entry['id']}/check-out", json={"timestamp": "2024-06-03T19:30:00Z"})

    response = client.get(f"{ATTENDANCE}/overtime",
                          params={"staff_id": str(staff.id), "year": 2024, "month": "jun"})

    assert response.status_code == 200
    body = response.json()
    assert body["total_ot_minutes"] == 90
    assert body["total_ot_hours"] == 1.5
    assert body["entry_count"] == 1


def test_payroll_lifecycle(client, staff):
    advance = client.post(f"{ADVANCES}/", json={
        "staff_id": str(staff.id), "amount": "1000", "reason": "rent", "repayment_plan": "next salary"
    })
    assert advance.status_code == 201
    assert advance.json()["status"] == "pending"

    reviewed = client.patch(f"{ADVANCES}/{advance.json()['id']}/status", json={"status": "approved"})
    assert reviewed.json()["approved_date"] is not None

    payload = {"staff_id": str(staff.id), "month": "june", "year": 2024,
               "ot_hours": "5", "food_deduction": "2500"}
    response = client.post(f"{PAYROLL}/process", json=payload)
    assert response.status_code == 201
    record = response.json()
    assert record["month"] == 6
    assert record["month_name"] == "June"
    assert Decimal(record["net_salary"]) == Decimal("26750")
    assert Decimal(record["total_deductions"]) == Decimal("3500")

    response = client.patch(f"{PAYROLL}/{record['id']}/paid", json={"paid_date": "2024-07-01"})
    assert response.status_code == 200
    assert response.json()["is_paid"] is True

    response = client.patch(f"{PAYROLL}/{record['id']}/paid", json={"paid_date": "2024-07-02"})
    assert response.status_code == 409
    assert response.json()["error"] == "PayrollAlreadyPaid"

    response = client.post(f"{PAYROLL}/process", json=payload)
    assert response.status_code == 409

    listing = client.get(f"{PAYROLL}/", params={"staff_id": str(staff.id)}).json()
    assert listing["total"] == 1

    response = client.delete(f"{PAYROLL}/{record['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "PayrollAlreadyPaid"
    assert client.get(f"{PAYROLL}/{record['id']}").json()["is_paid"] is True


def test_delete_unpaid_payroll(client, staff):
    payload = {"staff_id": str(staff.id), "month": 6, "year": 2024}
    record = client.post(f"{PAYROLL}/process", json=payload).json()

    response = client.delete(f"{PAYROLL}/{record['id']}")
    assert response.json() == {"message": "Payroll record deleted successfully", "payroll_id": record["id"]}
    assert client.get(f"{PAYROLL}/{record['id']}").json()["error"] == "RecordNotFound"


def test_payroll_invalid_month(client, staff):
    response = client.post(f"{PAYROLL}/process",
                           json={"staff_id": str(staff.id), "month": "Juno", "year": 2024})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidMonth"

    response = client.get(f"{ATTENDANCE}/overtime",
                          params={"staff_id": str(staff.id), "year": 2024, "month": "፩"})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidMonth"


def test_payroll_negative_input_is_rejected(client, staff):
    response = client.post(f"{PAYROLL}/process",
                           json={"staff_id": str(staff.id), "month": 6, "year": 2024, "food_deduction": "-1"})

    assert response.status_code == 422


def test_advance_listing_by_status(client, staff):
    for amount in ("100", "200"):
        client.post(f"{ADVANCES}/", json={
            "staff_id": str(staff.id), "amount": amount, "reason": "misc", "repayment_plan": "monthly"
        })

    body = client.get(f"{ADVANCES}/", params={"status": "pending"}).json()

    assert body["total"] == 2
