import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select

from app.core.errors import Forbidden, InvalidArgument, NotFound
from app.crud.attendance import attendance_crud
from app.models.attendance import Attendance
from app.models.payment import Payment
from app.services.attendance import AttendanceRecorder


def _rows(db):
    return db.scalar(select(func.count()).select_from(Attendance))


def test_scan_by_email_is_idempotent(db, make_user, make_workshop):
    user = make_user("ana@example.com", status_event=True)
    w = make_workshop("Robótica")

    first = AttendanceRecorder(db).scan("ana@example.com", workshop_id=w.id)
    second = AttendanceRecorder(db).scan("ana@example.com", workshop_id=w.id)

    assert first["status"] == "ok"
    assert second["status"] == "already_registered"
    assert first["attendanceId"] == second["attendanceId"]
    assert first["user"]["id"] == user.id
    assert first["workshop"]["name"] == "Robótica"
    assert _rows(db) == 1


def test_scan_resolves_matricula_and_id(db, make_user):
    by_code = make_user(status_event=True, matricula="A0001")
    by_id = make_user(status_event=True)

    assert AttendanceRecorder(db).scan("A0001")["user"]["id"] == by_code.id
    assert AttendanceRecorder(db).scan(str(by_id.id))["user"]["id"] == by_id.id


def test_scan_without_workshop_has_no_scope(db, make_user):
    make_user("solo@example.com", status_event=True)
    out = AttendanceRecorder(db).scan("  solo@example.com ")
    assert out["workshop"] is None
    assert AttendanceRecorder(db).scan("solo@example.com")["status"] == "already_registered"


def test_same_user_different_workshops(db, make_user, make_workshop):
    make_user("b@example.com", status_event=True)
    w1, w2 = make_workshop("Um"), make_workshop("Dois")

    AttendanceRecorder(db).scan("b@example.com", workshop_id=w1.id)
    out = AttendanceRecorder(db).scan("b@example.com", workshop_id=w2.id)

    assert out["status"] == "ok"
    assert _rows(db) == 2


@pytest.mark.parametrize("value", ["", "   ", None])
def test_empty_value(db, value):
    with pytest.raises(InvalidArgument):
        AttendanceRecorder(db).scan(value)


def test_unknown_user(db):
    with pytest.raises(NotFound):
        AttendanceRecorder(db).scan("ninguem@example.com")


def test_unpaid_user_forbidden(db, make_user):
    make_user("c@example.com", status_event=False)
    with pytest.raises(Forbidden):
        AttendanceRecorder(db).scan("c@example.com")
    assert _rows(db) == 0


def test_scan_accepts_paid_payment_row(db, make_user, make_workshop):
    user = make_user("f@example.com", status_event=False)
    db.add(Payment(session_id="cs_scan", user_id=user.id, status="complete", payment_status="paid"))
    db.commit()
    w = make_workshop("Pago por sessão")

    out = AttendanceRecorder(db).scan("f@example.com", workshop_id=w.id)

    assert out["status"] == "ok"
    assert out["user"]["id"] == user.id
    assert _rows(db) == 1


def test_concurrent_scans_record_once(db, session_factory, make_user, monkeypatch):
    make_user("race@example.com", status_event=True)
    barrier = threading.Barrier(2)
    waited = set()
    original_find = attendance_crud.find

    # segura as duas threads logo após a busca, antes de qualquer insert
    def find_then_wait(session, **kw):
        found = original_find(session, **kw)
        ident = threading.get_ident()
        if ident not in waited:
            waited.add(ident)
            barrier.wait(timeout=10)
        return found

    monkeypatch.setattr(attendance_crud, "find", find_then_wait)

    def attempt(_):
        session = session_factory()
        try:
            return AttendanceRecorder(session).scan("race@example.com")["status"]
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(attempt, range(2)))

    assert sorted(results) == ["already_registered", "ok"]
    db.expire_all()
    assert _rows(db) == 1


def test_unknown_workshop(db, make_user):
    make_user("d@example.com", status_event=True)
    with pytest.raises(NotFound):
        AttendanceRecorder(db).scan("d@example.com", workshop_id=404)


def test_users_by_type(db, make_user, make_workshop):
    w = make_workshop("Agrupado")
    student = make_user("e@example.com", status_event=True, workshop_id=w.id)
    make_user("f@example.com", status_event=True, workshop_id=w.id, type_name="Docente")
    walk_in = make_user("g@example.com", status_event=True, type_name="Externo")

    AttendanceRecorder(db).scan("e@example.com", workshop_id=w.id)
    AttendanceRecorder(db).scan("g@example.com", workshop_id=w.id)

    out = AttendanceRecorder(db).users_by_type(w.id)
    by_id = {u["id"]: u for u in out["all"]}

    assert len(out["all"]) == 3
    assert by_id[student.id]["attended"] is True
    assert by_id[student.id]["attendance_time"] is not None
    assert by_id[walk_in.id]["attended"] is True
    assert set(out["byType"]) == {"Estudiante", "Docente", "Externo"}
    assert [u["attended"] for u in out["byType"]["Docente"]] == [False]


# ---------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------

def test_scan_endpoint(client, admin, make_user, make_workshop, auth_header):
    make_user("h@example.com", status_event=True)
    w = make_workshop("Portaria")
    body = {"qrValue": "h@example.com", "workshopId": w.id}

    r1 = client.post("/api/v1/admin/attendance/scan-qr", json=body, headers=auth_header(admin))
    r2 = client.post("/api/v1/admin/attendance/scan-qr", json=body, headers=auth_header(admin))

    assert r1.status_code == r2.status_code == 200
    assert r1.json()["status"] == "ok"
    assert r2.json()["status"] == "already_registered"
    assert r1.json()["attendanceId"] == r2.json()["attendanceId"]


def test_scan_endpoint_accepts_token_alias(client, admin, make_user, auth_header):
    make_user("i@example.com", status_event=True)
    r = client.post("/api/v1/admin/attendance/scan-qr", json={"token": "i@example.com"}, headers=auth_header(admin))
    assert r.status_code == 200
    assert r.json()["workshop"] is None


def test_scan_endpoint_errors(client, admin, make_user, auth_header):
    make_user("j@example.com", status_event=False)
    url = "/api/v1/admin/attendance/scan-qr"
    assert client.post(url, json={"qrValue": ""}, headers=auth_header(admin)).status_code == 400
    assert client.post(url, json={"qrValue": "x@example.com"}, headers=auth_header(admin)).status_code == 404
    assert client.post(url, json={"qrValue": "j@example.com"}, headers=auth_header(admin)).status_code == 403


def test_attendance_routes_require_admin(client, make_user, auth_header):
    student = make_user(status_event=True)
    r = client.get("/api/v1/admin/attendance/workshops", headers=auth_header(student))
    assert r.status_code == 403


def test_scanner_workshop_list(client, admin, make_workshop, auth_header):
    make_workshop("Beta")
    make_workshop("Alfa", status="inactive")
    r = client.get("/api/v1/admin/attendance/workshops", headers=auth_header(admin))
    assert [w["name"] for w in r.json()["workshops"]] == ["Alfa", "Beta"]
