# app/services/admin_users.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, joinedload

from app.core.errors import Forbidden, InvalidArgument, NotFound
from app.crud.payment import payment_crud
from app.crud.user import user_crud
from app.crud.workshop import workshop_crud
from app.models.attendance import Attendance
from app.models.payment import Payment
from app.models.user import User, UserStatus
from app.models.user_type import UserType
from app.models.workshop import Workshop
from app.utils.academics import (
    build_multi_term_search,
    normalize_grade,
    normalize_group,
    split_grade_group,
)

logger = logging.getLogger(__name__)

TYPE_LABELS = {"Estudiante", "Docente", "Ponente/Tallerista", "Externo", "Admin"}
STATUS_LABELS = {
    "Activo": UserStatus.active.value,
    "Inactivo": UserStatus.inactive.value,
    "Suspendido": UserStatus.suspended.value,
    "Eliminado": UserStatus.deleted.value,
}
PAYMENT_LABELS = {"Pagado": True, "No pagado": False}
BLOCKED_STATUSES = {UserStatus.deleted.value, UserStatus.suspended.value}
MAX_PAGE_SIZE = 200


def parse_filter_kv(raw: Optional[str]) -> Dict[str, str]:
    """'status:active, payment:true' -> {'status': 'active', 'payment': 'true'}"""
    if not raw or ":" not in raw:
        return {}
    out: Dict[str, str] = {}
    for part in (p.strip() for p in raw.split(",")):
        if not part or ":" not in part:
            continue
        k, v = (x.strip() for x in part.split(":", 1))
        if k and v:
            out[k.lower()] = v
    return out


def _payment_label(user: User) -> str:
    return "Pagado" if user.status_event else "No pagado"


class AdminUserDirectory:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # opções de filtro
    # ------------------------------------------------------------------
    def filter_options(self) -> Dict[str, Any]:
        db = self.db
        not_deleted = User.status != UserStatus.deleted.value
        grades_raw = db.scalars(select(User.grade).where(User.grade.is_not(None), not_deleted).distinct()).all()
        groups_raw = db.scalars(select(User.group_name).where(User.group_name.is_not(None), not_deleted).distinct()).all()
        types = db.scalars(select(UserType).order_by(UserType.id)).all()

        grades = sorted({g for g in (normalize_grade(r) for r in grades_raw) if g}, key=int)
        groups = sorted({g for g in (normalize_group(r) for r in groups_raw) if g})
        return {
            "grades": grades,
            "groups": groups,
            "types": [{"id": t.id, "name": t.name} for t in types],
            "statuses": [s.value for s in UserStatus],
            "eventStatuses": [True, False],
        }

    # ------------------------------------------------------------------
    # listagem
    # ------------------------------------------------------------------
    def _conditions(self, q, filter, grade, group) -> list:
        effective = None if filter == "Todos" else filter
        grade_norm = group_norm = None
        if grade:
            if "10" in grade:
                grade_norm = "10"
            else:
                grade_norm, split_group = split_grade_group(grade)
                if not group and split_group:
                    group_norm = split_group
        if group:
            group_norm = normalize_group(group)

        conds = []
        search = build_multi_term_search((q or "").split())
        if search is not None:
            conds.append(search)
        if grade_norm:
            conds.append(User.grade == grade_norm)
        if group_norm:
            conds.append(User.group_name == group_norm)

        if effective and ":" not in effective:
            if effective in TYPE_LABELS:
                conds.append(User.user_type.has(func.lower(UserType.name) == effective.lower()))
            elif effective in STATUS_LABELS:
                conds.append(User.status == STATUS_LABELS[effective])
            elif effective in PAYMENT_LABELS:
                conds.append(User.status_event.is_(PAYMENT_LABELS[effective]))

        kv = parse_filter_kv(effective)
        if kv.get("status", "").lower() in {s.value for s in UserStatus}:
            conds.append(User.status == kv["status"].lower())
        if kv.get("type"):
            conds.append(User.user_type.has(func.lower(UserType.name) == kv["type"].lower()))
        for key in ("payment", "event"):
            if kv.get(key) == "true":
                conds.append(User.status_event.is_(True))
            elif kv.get(key) == "false":
                conds.append(User.status_event.is_(False))
        return conds

    def list_users(
        self,
        *,
        q: Optional[str] = None,
        filter: Optional[str] = None,
        grade: Optional[str] = None,
        group: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Dict[str, Any]:
        if page < 1:
            raise InvalidArgument("page deve ser maior que 0")
        if page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise InvalidArgument(f"pageSize deve estar entre 1 e {MAX_PAGE_SIZE}")

        db = self.db
        conds = self._conditions(q, filter, grade, group)
        total = db.scalar(select(func.count()).select_from(User)) or 0
        total_filtered = db.scalar(select(func.count()).select_from(User).where(*conds)) or 0
        rows = db.scalars(
            select(User)
            .where(*conds)
            .options(joinedload(User.user_type))
            .order_by(User.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).all()

        data = [
            {
                "id": u.id,
                "name": u.full_name,
                "email": u.email,
                "phone": u.phone,
                "code": u.matricula or str(u.id),
                "provenance": u.provenance,
                "educational_program": u.educational_program,
                "grade": normalize_grade(u.grade),
                "group": normalize_group(u.group_name),
                "type": u.type_name,
                "isActive": u.status == UserStatus.active.value,
                "eventEnabled": bool(u.status_event),
                "status_event": bool(u.status_event),
                "isBadgePrinted": bool(u.is_badge_printed),
                "workshop_id": u.workshop_id,
                "paymentStatus": _payment_label(u),
            }
            for u in rows
        ]
        return {"total": total, "total_filtro": total_filtered, "page": page, "pageSize": page_size, "data": data}

    # ------------------------------------------------------------------
    # ativação
    # ------------------------------------------------------------------
    def set_activation(
        self,
        user_id: int,
        *,
        activate: bool,
        force: bool = False,
        reason: Optional[str] = None,
        status_event: Optional[bool] = None,
    ) -> Dict[str, Any]:
        db = self.db
        user = db.get(User, user_id)
        if not user:
            raise NotFound("Usuário não encontrado")
        if user.status in BLOCKED_STATUSES:
            raise Forbidden(f"Não é possível modificar um usuário {user.status}")
        if activate and not force and not payment_crud.has_paid(db, user_id):
            raise InvalidArgument("Não é possível ativar sem um pagamento válido. Use force:true para forçar.")

        user.status_event = status_event if isinstance(status_event, bool) else activate
        if activate:
            user.status = UserStatus.active.value
        db.add(user); db.commit(); db.refresh(user)
        logger.info(
            "user %s activation=%s force=%s status_event=%s reason=%r",
            user.id, activate, force, user.status_event, reason,
        )

        if activate:
            message = "Usuário ativado " + ("(manual)" if force else "(com pagamento verificado)")
        else:
            message = "Usuário desativado"
        return {
            "id": user.id,
            "name": user.full_name,
            "email": user.email,
            "status": user.status,
            "eventEnabled": bool(user.status_event),
            "status_event": bool(user.status_event),
            "paymentStatus": _payment_label(user),
            "message": message,
        }

    def set_activation_bulk(
        self,
        ids: List[int],
        *,
        activate: bool,
        force: bool = False,
        status_event: Optional[bool] = None,
    ) -> List[Dict[str, Any]]:
        if not ids:
            raise InvalidArgument("Envie pelo menos um ID")
        db = self.db
        records = user_crud.list_by_ids(db, ids)
        if not records:
            raise NotFound("Usuários não encontrados")

        blocked = [u for u in records if u.status in BLOCKED_STATUSES]
        if blocked and not force:
            raise Forbidden(f"Há {len(blocked)} usuários suspensos ou eliminados")

        if activate and not force:
            paid = payment_crud.paid_user_ids(db, ids)
            without = [i for i in ids if i not in paid]
            if without:
                raise InvalidArgument(f"Não é possível ativar {len(without)} usuário(s) sem pagamento. Use force:true.")

        values: Dict[str, Any] = {"status_event": status_event if isinstance(status_event, bool) else activate}
        if activate:
            values["status"] = UserStatus.active.value
        db.execute(
            update(User)
            .where(User.id.in_(ids), User.status.not_in(BLOCKED_STATUSES))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        logger.info("bulk activation ids=%s activate=%s force=%s", ids, activate, force)

        return [
            {
                "id": u.id,
                "eventEnabled": bool(u.status_event),
                "status_event": bool(u.status_event),
                "paymentStatus": _payment_label(u),
            }
            for u in user_crud.list_by_ids(db, ids)
        ]

    # ------------------------------------------------------------------
    # exclusão
    # ------------------------------------------------------------------
    def delete_user(self, user_id: int) -> Dict[str, Any]:
        db = self.db
        user = db.get(User, user_id)
        if not user:
            raise NotFound("Usuário não encontrado")
        workshop_id = user.workshop_id

        db.execute(delete(Attendance).where(Attendance.user_id == user_id))
        db.execute(delete(Payment).where(Payment.user_id == user_id))
        db.delete(user)
        db.flush()
        if workshop_id:
            # mantém o contador da oficina igual à contagem real
            count = workshop_crud.count_participants(db, workshop_id)
            db.execute(update(Workshop).where(Workshop.id == workshop_id).values(spots_occupied=count))
        db.commit()
        logger.info("user %s deleted", user_id)
        return {"message": "Usuário eliminado corretamente", "id": user_id}
