import hashlib
import hmac
import json
import time

import pytest
from sqlalchemy import func, select

from app.core.config import settings
from app.core.errors import InvalidArgument
from app.models.payment import Payment
from app.models.user import User
from app.services.payments import PaymentGateway, verify_event

SECRET = "whsec_unit"


def _stripe_header(body, secret, timestamp=None):
    # mesmo formato que o Stripe envia: t=<unix>,v1=<hmac-sha256 de "t.corpo">
    ts = int(time.time()) if timestamp is None else timestamp
    mac = hmac.new(secret.encode(), f"{ts}.".encode() + body, hashlib.sha256).hexdigest()
    return f"t={ts},v1={mac}"


def _session(user_id, session_id="cs_test_1", payment_status="paid"):
    return {
        "id": session_id,
        "object": "checkout.session",
        "status": "complete",
        "payment_status": payment_status,
        "amount_total": 45000,
        "currency": "mxn",
        "customer_email": "pagador@example.com",
        "client_reference_id": str(user_id) if user_id is not None else None,
        "metadata": {"userId": str(user_id)} if user_id is not None else {},
    }


def _payments(db):
    return db.scalar(select(func.count()).select_from(Payment))


def test_stripe_signature_accepts_and_rejects():
    body = b'{"type":"ping"}'
    header = _stripe_header(body, SECRET)
    verify_event(body, header, SECRET, tolerance=300)

    with pytest.raises(InvalidArgument):
        verify_event(body, None, SECRET, tolerance=300)
    with pytest.raises(InvalidArgument):
        verify_event(body + b" ", header, SECRET, tolerance=300)
    with pytest.raises(InvalidArgument):
        verify_event(body, header, "outro", tolerance=300)
    with pytest.raises(InvalidArgument):
        verify_event(body, "v1=abc", SECRET, tolerance=300)

    stale = _stripe_header(body, SECRET, timestamp=int(time.time()) - 3600)
    with pytest.raises(InvalidArgument):
        verify_event(body, stale, SECRET, tolerance=300)


def test_mark_paid_sets_flag_and_is_idempotent(db, make_user):
    user = make_user(status_event=False)
    gateway = PaymentGateway(db)

    first = gateway.mark_paid_from_session(_session(user.id))
    second = gateway.mark_paid_from_session(_session(user.id))

    assert first.id == second.id
    assert _payments(db) == 1
    db.expire_all()
    assert db.get(User, user.id).status_event is True
    assert first.user_id == user.id
    assert first.amount_total == 45000


def test_unpaid_session_is_ignored(db, make_user):
    user = make_user(status_event=False)
    assert PaymentGateway(db).mark_paid_from_session(_session(user.id, payment_status="unpaid")) is None
    assert _payments(db) == 0
    db.expire_all()
    assert db.get(User, user.id).status_event is False


def test_unknown_user_still_records_payment(db):
    payment = PaymentGateway(db).mark_paid_from_session(_session(4040, session_id="cs_orphan"))
    assert payment.user_id is None
    assert payment.client_reference_id == "4040"


def test_other_events_are_acknowledged(db):
    out = PaymentGateway(db).handle_event({"type": "invoice.created", "data": {"object": {}}})
    assert out == {"received": True}
    assert _payments(db) == 0


# ---------------------------------------------------------------------
# HTTP: POST /api/v1/payments/webhook
# ---------------------------------------------------------------------

@pytest.fixture()
def webhook_secret(monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_WEBHOOK_SECRET", SECRET)
    return SECRET


def _post(client, event, secret=None, header=None):
    body = json.dumps(event).encode()
    headers = {"Content-Type": "application/json"}
    if header is not None:
        headers["Stripe-Signature"] = header
    elif secret:
        headers["Stripe-Signature"] = _stripe_header(body, secret)
    return client.post("/api/v1/payments/webhook", content=body, headers=headers)


def test_webhook_completed_session(client, db, make_user, webhook_secret):
    user = make_user(status_event=False)
    event = {"type": "checkout.session.completed", "data": {"object": _session(user.id)}}

    r1 = _post(client, event, secret=webhook_secret)
    r2 = _post(client, event, secret=webhook_secret)

    assert r1.status_code == r2.status_code == 200
    assert r1.json() == {"received": True}
    assert _payments(db) == 1
    db.expire_all()
    assert db.get(User, user.id).status_event is True


def test_webhook_async_payment_succeeded(client, db, make_user, webhook_secret):
    user = make_user(status_event=False)
    event = {"type": "checkout.session.async_payment_succeeded", "data": {"object": _session(user.id, "cs_async")}}
    assert _post(client, event, secret=webhook_secret).status_code == 200
    db.expire_all()
    assert db.get(User, user.id).status_event is True


def test_webhook_rejects_bad_signature(client, db, make_user, webhook_secret):
    user = make_user(status_event=False)
    event = {"type": "checkout.session.completed", "data": {"object": _session(user.id)}}

    assert _post(client, event).status_code == 400
    assert _post(client, event, header="t=1,v1=deadbeef").status_code == 400
    assert _post(client, event, secret="errado").status_code == 400
    assert _payments(db) == 0


def test_webhook_without_secret_skips_verification(client, db, make_user, monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_WEBHOOK_SECRET", "")
    user = make_user(status_event=False)
    event = {"type": "checkout.session.completed", "data": {"object": _session(user.id, "cs_nosig")}}
    assert _post(client, event).status_code == 200
    assert _payments(db) == 1


def test_webhook_invalid_json(client, monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_WEBHOOK_SECRET", "")
    r = client.post("/api/v1/payments/webhook", content=b"{nope", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
