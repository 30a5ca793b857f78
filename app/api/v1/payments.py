# app/api/v1/payments.py
from __future__ import annotations
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import settings
from app.core.errors import InvalidArgument
from app.services.payments import PaymentGateway, verify_event

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/webhook")
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
):
    # corpo cru: a assinatura é sobre os bytes exatos
    payload = await request.body()
    try:
        event = json.loads(payload or b"{}")
    except ValueError:
        raise InvalidArgument("Payload do webhook inválido")
    if not isinstance(event, dict):
        raise InvalidArgument("Payload do webhook inválido")

    if settings.PAYMENT_WEBHOOK_SECRET:
        verify_event(
            payload,
            stripe_signature,
            settings.PAYMENT_WEBHOOK_SECRET,
            settings.PAYMENT_WEBHOOK_TOLERANCE_SECONDS,
        )

    logger.info("payment webhook received: %s", event.get("type"))
    return PaymentGateway(db).handle_event(event)
