# app/services/attendance.py
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, InvalidArgument, NotFound
from app.crud.attendance import attendance_crud
from app.crud.user import user_crud
from app.crud.workshop import workshop_crud
from app.models.attendance import Attendance
from app.models.user import User
from app.models.user_type import DEFAULT_TYPE
from app.models.workshop import Workshop
from app.services.workshop_directory import is_payment_eligible

logger = logging.getLogger(__name__)


def _workshop_ref(w: Workshop) -> Dict[str, Any]:
    return {
        "id": w.id,
        "name": w.name,
        "building": w.building,
        "classroom": w.classroom,
        "category": w.category,
    }


def _user_ref(u: User) -> Dict[str, Any]:
    return {
        "id": u.id,
        "name": u.full_name,
        "email": u.email,
        "matricula": u.matricula,
        "type": u.type_name,
        "status_event": bool(u.status_event),
    }


class AttendanceRecorder:
    def __init__(self, db: Session):
        self.db = db

    def scan(self, qr_value: Optional[str], workshop_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Registra a presença a partir do valor lido no QR (e-mail, matrícula ou id).
        Idempotente: repetir o mesmo (valor, oficina) devolve o registro já existente.
        """
        raw = (qr_value or "").strip()
        if not raw:
            raise InvalidArgument("QR vazio.")

        db = self.db
        user = user_crud.find_by_qr_value(db, raw)
        if not user:
            raise NotFound("QR inválido ou usuário não encontrado.")
        if not is_payment_eligible(db, user):
            raise Forbidden("O usuário não tem pagamento confirmado para o evento.")

        workshop = None
        if workshop_id:
            workshop = workshop_crud.get(db, workshop_id)
            if not workshop:
                raise NotFound("Oficina / evento não encontrado.")

        try:
            attendance, already = self._record(user.id, raw, workshop)
        except IntegrityError:
            # scan concorrente do mesmo QR gravou primeiro (escopo ou presença)
            db.rollback()
            logger.info("concurrent scan detected user=%s workshop=%s", user.id, workshop_id)
            attendance, already = self._record(user.id, raw, workshop)

        if already:
            logger.info("attendance already registered user=%s workshop=%s", user.id, workshop_id)
        else:
            logger.info("attendance %s registered user=%s workshop=%s", attendance.id, user.id, workshop_id)

        return {
            "status": "already_registered" if already else "ok",
            "message": (
                "A presença já havia sido registrada anteriormente."
                if already else "Presença registrada corretamente."
            ),
            "attendanceId": attendance.id,
            "at": attendance.date_time,
            "user": _user_ref(user),
            "workshop": _workshop_ref(workshop) if workshop else None,
        }

    def _record(self, user_id: int, raw: str, workshop: Optional[Workshop]):
        db = self.db
        qr_code_id = None
        if workshop is not None:
            qr_code_id = attendance_crud.get_or_create_scope(db, token=raw, workshop_id=workshop.id).id
        existing = attendance_crud.find(db, user_id=user_id, qr_code_id=qr_code_id)
        if existing:
            attendance, already = existing, True
        else:
            attendance = attendance_crud.create(db, {"user_id": user_id, "qr_code_id": qr_code_id}, commit=False)
            already = False
        db.commit()
        db.refresh(attendance)
        return attendance, already

    def list_workshops(self) -> Dict[str, Any]:
        rows = workshop_crud.list_all_by_name(self.db)
        return {"workshops": [{**_workshop_ref(w), "status": w.status} for w in rows]}

    def users_by_type(self, workshop_id: int) -> Dict[str, Any]:
        """Inscritos na oficina + quem passou pelo QR da oficina, agrupados por tipo."""
        db = self.db
        workshop = workshop_crud.get(db, workshop_id)
        if not workshop:
            raise NotFound("Oficina / evento não encontrado.")

        agg: "OrderedDict[int, Dict[str, Any]]" = OrderedDict()

        def ensure(u: User) -> Dict[str, Any]:
            if u.id not in agg:
                agg[u.id] = {"user": u, "attended": False, "attendance_time": None}
            return agg[u.id]

        for u in workshop.participants:
            ensure(u)

        records: List[Attendance] = attendance_crud.list_for_workshop(db, workshop.id)
        for rec in records:
            entry = ensure(rec.user)
            entry["attended"] = True
            last: Optional[datetime] = entry["attendance_time"]
            if last is None or (rec.date_time and rec.date_time > last):
                entry["attendance_time"] = rec.date_time

        all_users = []
        for entry in agg.values():
            u = entry["user"]
            all_users.append({
                "id": u.id,
                "name": u.full_name,
                "email": u.email,
                "matricula": u.matricula,
                "status_event": bool(u.status_event),
                "type": u.type_name,
                "attended": entry["attended"],
                "attendance_time": entry["attendance_time"],
            })

        by_type: Dict[str, List[Dict[str, Any]]] = {}
        for item in all_users:
            by_type.setdefault(item["type"] or DEFAULT_TYPE, []).append(item)

        return {"workshop": _workshop_ref(workshop), "all": all_users, "byType": by_type}
