from typing import Iterable, Set
from sqlalchemy.orm import Session
from sqlalchemy import select, func, or_
from app.crud.base import CRUDBase
from app.models.payment import Payment

def _paid_clause():
    # qualquer um dos três sinais do provedor conta como pago
    return or_(
        func.lower(Payment.payment_status) == "paid",
        func.lower(Payment.status) == "paid",
        func.lower(Payment.payment_intent_status) == "succeeded",
    )

class CRUDPayment(CRUDBase[Payment]):
    def has_approved_payment(self, db: Session, user_id: int) -> bool:
        """Pagamento concluído: payment_status=paid e status=complete."""
        stmt = select(Payment.id).where(
            Payment.user_id == user_id,
            Payment.payment_status == "paid",
            Payment.status == "complete",
        ).limit(1)
        return db.execute(stmt).first() is not None

    def has_paid(self, db: Session, user_id: int) -> bool:
        stmt = select(func.count(Payment.id)).where(Payment.user_id == user_id, _paid_clause())
        return (db.scalar(stmt) or 0) > 0

    def paid_user_ids(self, db: Session, user_ids: Iterable[int]) -> Set[int]:
        ids = list(user_ids)
        if not ids:
            return set()
        stmt = select(Payment.user_id).where(Payment.user_id.in_(ids), _paid_clause()).distinct()
        return {uid for (uid,) in db.execute(stmt).all() if uid is not None}

    def get_by_session(self, db: Session, session_id: str) -> Payment | None:
        return db.execute(select(Payment).where(Payment.session_id == session_id)).scalar_one_or_none()

payment_crud = CRUDPayment(Payment)
