# app/services/enrollment.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.errors import Conflict, DomainError, Forbidden, InvalidArgument, InvalidState, NotFound
from app.crud.workshop import workshop_crud
from app.models.user import User
from app.models.workshop import Workshop
from app.services.workshop_directory import is_payment_eligible, is_unlimited

logger = logging.getLogger(__name__)


class EnrollmentService:
    """
    Inscreve o usuário em uma oficina (apenas uma por usuário).

    - exige pagamento verificado (users.status_event ou payment paid/complete)
    - respeita o limite de vagas (spots_max NULL/0 = ilimitado)
    - numa única transação: atribui a oficina ao usuário, recalcula
      spots_occupied = COUNT(users da oficina) e revalida o limite
    """

    def __init__(self, db: Session):
        self.db = db

    def enroll(self, user_id: int, workshop_id: Optional[int]) -> Dict[str, Any]:
        if not isinstance(workshop_id, int) or isinstance(workshop_id, bool) or workshop_id < 1:
            raise InvalidArgument("workshopId inválido")

        db = self.db
        user = db.get(User, user_id)
        if not user:
            raise NotFound("Usuário não encontrado")
        if user.workshop_id:
            raise InvalidState("Você já está inscrito em uma oficina")
        if not is_payment_eligible(db, user):
            raise Forbidden("Pagamento não verificado")

        workshop = workshop_crud.get_active(db, workshop_id)
        if not workshop:
            raise NotFound("Oficina não encontrada")

        workshop_name = workshop.name or ""
        limited = not is_unlimited(workshop.spots_max)
        # pré-checagem otimista; a checagem que vale é a da transação
        if limited and (workshop.spots_occupied or 0) >= workshop.spots_max:
            logger.info("enroll rejected (full) user=%s workshop=%s", user_id, workshop_id)
            raise Conflict("Vagas esgotadas")

        try:
            self._enroll_tx(user_id, workshop_id)
            db.commit()
        except DomainError as exc:
            db.rollback()
            logger.warning("enroll aborted user=%s workshop=%s: %s", user_id, workshop_id, exc.message)
            raise
        except Exception:
            db.rollback()
            raise

        logger.info("user %s enrolled in workshop %s", user_id, workshop_id)
        return {
            "ok": True,
            "message": "Inscrição realizada",
            "user_id": user_id,
            "workshop_id": workshop_id,
            "workshop_name": workshop_name,
        }

    def _enroll_tx(self, user_id: int, workshop_id: int) -> None:
        db = self.db

        # (a) leitura "ao vivo" das vagas; trava a linha onde o banco suporta
        row = db.execute(
            select(Workshop.spots_max, Workshop.spots_occupied)
            .where(Workshop.id == workshop_id)
            .with_for_update()
        ).one_or_none()
        if row is None:
            raise NotFound("Oficina não encontrada")
        spots_max, spots_occupied = row
        limited = not is_unlimited(spots_max)
        if limited and (spots_occupied or 0) >= spots_max:
            raise Conflict("Vagas esgotadas")

        # (b) workshop_id IS NULL no predicado: duas requisições do mesmo
        # usuário não podem ambas passar
        res = db.execute(
            update(User)
            .where(User.id == user_id, User.workshop_id.is_(None))
            .values(workshop_id=workshop_id)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            raise InvalidState("Você já está inscrito em uma oficina")

        # (c) reconciliação: recontagem, nunca incremento
        count = workshop_crud.count_participants(db, workshop_id)
        db.execute(
            update(Workshop)
            .where(Workshop.id == workshop_id)
            .values(spots_occupied=count)
            .execution_options(synchronize_session=False)
        )

        # (d) checagem autoritativa
        if limited and count > spots_max:
            raise Conflict("Limite de vagas excedido por concorrência, tente novamente.")
