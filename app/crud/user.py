from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select, or_
from app.crud.base import CRUDBase
from app.models.user import User

class CRUDUser(CRUDBase[User]):
    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.execute(select(User).where(User.email == (email or "").strip().lower())).scalar_one_or_none()

    def find_by_qr_value(self, db: Session, raw: str) -> Optional[User]:
        """
        Resolve o valor lido no QR: matrícula, e-mail ou id numérico.
        Havendo mais de um candidato, fica o primeiro encontrado (menor id).
        """
        conds = [User.matricula == raw, User.email == raw.lower()]
        if raw.isdigit():
            conds.append(User.id == int(raw))
        stmt = (
            select(User)
            .where(or_(*conds))
            .options(joinedload(User.user_type))
            .order_by(User.id)
            .limit(1)
        )
        return db.execute(stmt).scalars().first()

    def list_by_ids(self, db: Session, ids: List[int]) -> List[User]:
        if not ids:
            return []
        return list(db.scalars(select(User).where(User.id.in_(ids)).order_by(User.id)).all())

user_crud = CRUDUser(User)
