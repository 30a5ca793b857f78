import pytest

from app.core.errors import NotFound
from app.models.payment import Payment
from app.services.workshop_directory import (
    WorkshopDirectory,
    available_spots,
    enrollment_status,
)


@pytest.mark.parametrize(
    "spots_max, occupied, expected",
    [(None, 5, None), (0, 5, None), (10, 3, 7), (10, 10, 0), (10, 12, 0), (4, None, 4)],
)
def test_available_spots(spots_max, occupied, expected):
    assert available_spots(spots_max, occupied) == expected


@pytest.mark.parametrize(
    "kwargs, status, can_enroll, disabled, kind",
    [
        (dict(is_authenticated=False, has_payment=True, is_enrolled=True, available=5),
         "not_authenticated", False, True, "default"),
        (dict(is_authenticated=True, has_payment=False, is_enrolled=True, available=0),
         "already_enrolled", False, True, "success"),
        (dict(is_authenticated=True, has_payment=False, is_enrolled=False, available=0),
         "needs_payment", False, False, "warning"),
        (dict(is_authenticated=True, has_payment=True, is_enrolled=False, available=1),
         "can_enroll", True, False, "default"),
        (dict(is_authenticated=True, has_payment=True, is_enrolled=False, available=None),
         "can_enroll", True, False, "default"),
        (dict(is_authenticated=True, has_payment=True, is_enrolled=False, available=0),
         "no_spots", False, True, "danger"),
    ],
)
def test_enrollment_status_priority(kwargs, status, can_enroll, disabled, kind):
    info = enrollment_status(**kwargs)
    assert info["enrollment_status"] == status
    assert info["can_enroll"] is can_enroll
    assert info["button_disabled"] is disabled
    assert info["button_type"] == kind
    assert info["button_text"]


def test_enrolled_elsewhere_is_not_surfaced():
    info = enrollment_status(
        is_authenticated=True, has_payment=True, is_enrolled=False,
        available=3, user_workshop_id=7, workshop_id=9,
    )
    assert info["enrollment_status"] == "can_enroll"


def test_list_only_active_newest_first(db, make_workshop):
    make_workshop("Antigo")
    make_workshop("Fechado", status="inactive")
    make_workshop("Novo")

    names = [w["name"] for w in WorkshopDirectory(db).list_workshops()]
    assert names == ["Novo", "Antigo"]


def test_projection_fields(db, make_user, make_workshop):
    instructor = make_user(name="Maria", paternal_surname="Lopez", type_name="Ponente/Tallerista")
    w = make_workshop(
        "IA", spots_max=20, spots_occupied=5, instructor_user_id=instructor.id,
        building="B", classroom="12", tools=["python"],
    )

    item = WorkshopDirectory(db).get_workshop(w.id)

    assert item["workshop_id"] == w.id
    assert item["available_spots"] == 15
    assert item["instructor_name"] == "Maria Lopez"
    assert item["tools"] == ["python"]
    assert item["enrollment_status"] == "not_authenticated"
    assert item["is_user_enrolled"] is False


def test_viewer_statuses(db, make_user, make_workshop):
    full = make_workshop("Cheio", spots_max=1, spots_occupied=1)
    mine = make_workshop("Meu")
    open_ = make_workshop("Aberto", spots_max=None)

    enrolled = make_user(status_event=True, workshop_id=mine.id)
    unpaid = make_user(status_event=False)
    paid_by_row = make_user(status_event=False)
    db.add(Payment(session_id="cs_dir", user_id=paid_by_row.id, status="complete", payment_status="paid"))
    db.commit()

    directory = WorkshopDirectory(db)
    assert directory.get_workshop(mine.id, viewer_id=enrolled.id)["enrollment_status"] == "already_enrolled"
    assert directory.get_workshop(mine.id, viewer_id=enrolled.id)["is_user_enrolled"] is True
    assert directory.get_workshop(open_.id, viewer_id=unpaid.id)["enrollment_status"] == "needs_payment"
    assert directory.get_workshop(open_.id, viewer_id=paid_by_row.id)["enrollment_status"] == "can_enroll"
    assert directory.get_workshop(open_.id, viewer_id=paid_by_row.id)["available_spots"] is None
    assert directory.get_workshop(full.id, viewer_id=paid_by_row.id)["enrollment_status"] == "no_spots"


def test_available_list_filters_and_orders_by_name(db, make_workshop):
    make_workshop("Zeta", spots_max=0)
    make_workshop("Cheio", spots_max=2, spots_occupied=2)
    make_workshop("Alfa", spots_max=5, spots_occupied=1)
    make_workshop("Meio", spots_max=None)

    names = [w["name"] for w in WorkshopDirectory(db).list_available_workshops()]
    assert names == ["Alfa", "Meio", "Zeta"]


def test_get_inactive_is_not_found(db, make_workshop):
    w = make_workshop(status="inactive")
    with pytest.raises(NotFound):
        WorkshopDirectory(db).get_workshop(w.id)


# ---------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------

def test_public_routes_are_anonymous(client, make_workshop):
    w = make_workshop("Público", spots_max=None)

    r = client.get("/api/v1/workshops/public")
    assert r.status_code == 200
    assert r.json()[0]["enrollment_status"] == "not_authenticated"
    assert r.json()[0]["available_spots"] is None

    r = client.get(f"/api/v1/workshops/public/{w.id}")
    assert r.status_code == 200
    assert r.json()["workshop_id"] == w.id

    assert client.get("/api/v1/workshops/available/public").status_code == 200
    assert client.get("/api/v1/workshops/public/999").status_code == 404


def test_authenticated_routes(client, make_user, make_workshop, auth_header):
    w = make_workshop("Privado", spots_max=3)
    user = make_user(status_event=True)

    assert client.get("/api/v1/workshops").status_code == 401

    r = client.get("/api/v1/workshops", headers=auth_header(user))
    assert r.status_code == 200
    assert r.json()[0]["enrollment_status"] == "can_enroll"

    r = client.get(f"/api/v1/workshops/{w.id}", headers=auth_header(user))
    assert r.json()["available_spots"] == 3

    r = client.get("/api/v1/workshops/available/list", headers=auth_header(user))
    assert [x["workshop_id"] for x in r.json()] == [w.id]
