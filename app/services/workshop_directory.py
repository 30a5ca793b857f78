# app/services/workshop_directory.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.crud.payment import payment_crud
from app.crud.workshop import workshop_crud
from app.models.user import User
from app.models.workshop import Workshop

logger = logging.getLogger(__name__)


class EnrollmentStatus(str, Enum):
    not_authenticated = "not_authenticated"
    already_enrolled = "already_enrolled"
    needs_payment = "needs_payment"
    can_enroll = "can_enroll"
    no_spots = "no_spots"


# status -> (can_enroll, button_text, button_disabled, button_type)
_BUTTONS = {
    EnrollmentStatus.not_authenticated: (False, "Inscrever-se", True, "default"),
    EnrollmentStatus.already_enrolled: (False, "Já inscrito", True, "success"),
    EnrollmentStatus.needs_payment: (False, "Completar pagamento", False, "warning"),
    EnrollmentStatus.can_enroll: (True, "Inscrever-se", False, "default"),
    EnrollmentStatus.no_spots: (False, "Sem vagas", True, "danger"),
}


def is_unlimited(spots_max: Optional[int]) -> bool:
    # NULL ou 0 = ilimitado
    return not spots_max


def available_spots(spots_max: Optional[int], spots_occupied: Optional[int]) -> Optional[int]:
    """None representa vagas ilimitadas."""
    if is_unlimited(spots_max):
        return None
    return max(spots_max - (spots_occupied or 0), 0)


def is_payment_eligible(db: Session, user: User) -> bool:
    return bool(user.status_event) or payment_crud.has_approved_payment(db, user.id)


def enrollment_status(
    *,
    is_authenticated: bool,
    has_payment: bool,
    is_enrolled: bool,
    available: Optional[int],
    user_workshop_id: Optional[int] = None,
    workshop_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Estado do botão de inscrição, na ordem de prioridade (primeiro que casar):
    não autenticado > já inscrito NESTA oficina > sem pagamento > há vaga > sem vagas.
    Inscrição em OUTRA oficina não aparece aqui; quem barra é o EnrollmentService.
    """
    if not is_authenticated:
        status = EnrollmentStatus.not_authenticated
    elif is_enrolled or (user_workshop_id is not None and user_workshop_id == workshop_id):
        status = EnrollmentStatus.already_enrolled
    elif not has_payment:
        status = EnrollmentStatus.needs_payment
    elif available is None or available > 0:
        status = EnrollmentStatus.can_enroll
    else:
        status = EnrollmentStatus.no_spots

    can_enroll, text, disabled, kind = _BUTTONS[status]
    return {
        "enrollment_status": status.value,
        "can_enroll": can_enroll,
        "button_text": text,
        "button_disabled": disabled,
        "button_type": kind,
    }


def _instructor_name(w: Workshop) -> str:
    if w.instructor_name and w.instructor_name.strip():
        return w.instructor_name.strip()
    if w.instructor is None:
        return ""
    return w.instructor.full_name


class WorkshopDirectory:
    def __init__(self, db: Session):
        self.db = db

    def _viewer(self, viewer_id: Optional[int]):
        if not viewer_id:
            return None, False
        user = self.db.get(User, viewer_id)
        if not user:
            return None, False
        return user, is_payment_eligible(self.db, user)

    def _project(self, w: Workshop, viewer: Optional[User], authenticated: bool, has_payment: bool) -> Dict[str, Any]:
        avail = available_spots(w.spots_max, w.spots_occupied)
        user_workshop_id = viewer.workshop_id if viewer else None
        is_enrolled = user_workshop_id is not None and user_workshop_id == w.id
        info = enrollment_status(
            is_authenticated=authenticated,
            has_payment=has_payment,
            is_enrolled=is_enrolled,
            available=avail,
            user_workshop_id=user_workshop_id,
            workshop_id=w.id,
        )
        return {
            "workshop_id": w.id,
            "name": w.name or "",
            "description": w.description or "",
            "spots_max": w.spots_max or 0,
            "spots_occupied": w.spots_occupied or 0,
            "available_spots": avail,
            "building": w.building or "",
            "classroom": w.classroom or "",
            "status": w.status,
            "instructor_user_id": w.instructor_user_id,
            "instructor_name": _instructor_name(w),
            "level": w.level,
            "category": w.category,
            "tools": w.tools,
            "created_at": w.created_at,
            "updated_at": w.updated_at,
            "is_user_enrolled": is_enrolled,
            **info,
        }

    def _project_all(self, rows: List[Workshop], viewer_id: Optional[int]) -> List[Dict[str, Any]]:
        viewer, has_payment = self._viewer(viewer_id)
        return [self._project(w, viewer, viewer_id is not None, has_payment) for w in rows]

    def list_workshops(self, viewer_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._project_all(workshop_crud.list_active(self.db), viewer_id)

    def list_available_workshops(self, viewer_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._project_all(workshop_crud.list_available(self.db), viewer_id)

    def get_workshop(self, workshop_id: int, viewer_id: Optional[int] = None) -> Dict[str, Any]:
        w = workshop_crud.get_active(self.db, workshop_id)
        if not w:
            raise NotFound(f"Oficina com ID {workshop_id} não encontrada")
        viewer, has_payment = self._viewer(viewer_id)
        return self._project(w, viewer, viewer_id is not None, has_payment)
