from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select, or_, func
from app.crud.base import CRUDBase
from app.models.user import User
from app.models.workshop import Workshop, WorkshopStatus

class CRUDWorkshop(CRUDBase[Workshop]):
    def _active(self):
        return (
            select(Workshop)
            .where(Workshop.status == WorkshopStatus.active.value)
            .options(joinedload(Workshop.instructor))
        )

    def list_active(self, db: Session) -> List[Workshop]:
        stmt = self._active().order_by(Workshop.created_at.desc(), Workshop.id.desc())
        return list(db.execute(stmt).scalars().all())

    def get_active(self, db: Session, workshop_id: int) -> Optional[Workshop]:
        return db.execute(self._active().where(Workshop.id == workshop_id)).scalars().first()

    def list_available(self, db: Session) -> List[Workshop]:
        stmt = self._active().where(
            or_(
                Workshop.spots_max.is_(None),
                Workshop.spots_max == 0,
                Workshop.spots_max > func.coalesce(Workshop.spots_occupied, 0),
            )
        ).order_by(Workshop.name)
        return list(db.execute(stmt).scalars().all())

    def list_all_by_name(self, db: Session) -> List[Workshop]:
        return list(db.execute(select(Workshop).order_by(Workshop.name)).scalars().all())

    def count_participants(self, db: Session, workshop_id: int) -> int:
        return db.scalar(select(func.count()).select_from(User).where(User.workshop_id == workshop_id)) or 0

workshop_crud = CRUDWorkshop(Workshop)
