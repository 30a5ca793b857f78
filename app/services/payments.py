# app/services/payments.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import stripe
from sqlalchemy.orm import Session

from app.core.errors import InvalidArgument
from app.crud.payment import payment_crud
from app.models.payment import Payment
from app.models.user import User

logger = logging.getLogger(__name__)

PAID_EVENTS = {"checkout.session.completed", "checkout.session.async_payment_succeeded"}


def verify_event(payload: bytes, sig_header: Optional[str], secret: str, tolerance: int) -> None:
    """Confere o header Stripe-Signature (t=...,v1=...) sobre o corpo cru."""
    if not sig_header:
        raise InvalidArgument("Assinatura do webhook ausente")
    try:
        stripe.Webhook.construct_event(payload, sig_header, secret, tolerance=tolerance)
    except stripe.error.SignatureVerificationError as exc:
        logger.warning("webhook signature rejected: %s", exc)
        raise InvalidArgument("Assinatura do webhook inválida")
    except ValueError:
        raise InvalidArgument("Payload do webhook inválido")


def _user_id_from_session(session: Mapping[str, Any]) -> Optional[int]:
    raw = session.get("client_reference_id") or (session.get("metadata") or {}).get("userId")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("client_reference_id não numérico: %r", raw)
        return None


class PaymentGateway:
    def __init__(self, db: Session):
        self.db = db

    def mark_paid_from_session(self, session: Mapping[str, Any]) -> Optional[Payment]:
        """
        Upsert do pagamento pela sessão (idempotente) e, se a sessão aponta
        para um usuário existente, liga users.status_event. Tudo numa transação.
        """
        session_id = session.get("id")
        if not session_id:
            raise InvalidArgument("sessionId requerido")
        if session.get("payment_status") != "paid":
            logger.warning("session %s not paid (payment_status=%s)", session_id, session.get("payment_status"))
            return None

        db = self.db
        user_id = _user_id_from_session(session)
        user = db.get(User, user_id) if user_id is not None else None
        if user_id is not None and user is None:
            logger.warning("session %s references unknown user %s", session_id, user_id)

        intent = session.get("payment_intent")
        intent_status = intent.get("status") if isinstance(intent, Mapping) else None
        data = {
            "status": session.get("status") or "complete",
            "payment_status": session.get("payment_status") or "paid",
            "payment_intent_status": intent_status,
            "amount_total": session.get("amount_total") or 0,
            "currency": session.get("currency") or "mxn",
            "customer_email": session.get("customer_email"),
            "client_reference_id": session.get("client_reference_id"),
            "metadata_json": dict(session.get("metadata") or {}),
            "user_id": user.id if user else None,
        }

        try:
            payment = payment_crud.get_by_session(db, session_id)
            if payment is None:
                payment = Payment(session_id=session_id, **data)
                db.add(payment)
            else:
                for k, v in data.items():
                    setattr(payment, k, v)
            if user is not None:
                user.status_event = True
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("payment webhook transaction failed for session %s", session_id)
            raise
        db.refresh(payment)
        logger.info("payment %s recorded for session %s (user=%s)", payment.id, session_id, data["user_id"])
        return payment

    def handle_event(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        kind = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}
        if kind in PAID_EVENTS:
            self.mark_paid_from_session(obj)
        else:
            logger.info("ignoring payment event %s", kind)
        return {"received": True}
