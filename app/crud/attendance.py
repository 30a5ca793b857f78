from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
from app.crud.base import CRUDBase
from app.models.attendance import Attendance
from app.models.qr_code import QrCode

class CRUDAttendance(CRUDBase[Attendance]):
    def get_or_create_scope(self, db: Session, *, token: str, workshop_id: int) -> QrCode:
        qr = db.execute(
            select(QrCode).where(QrCode.token == token, QrCode.workshop_id == workshop_id)
        ).scalar_one_or_none()
        if not qr:
            qr = QrCode(token=token, workshop_id=workshop_id)
            db.add(qr)
            db.flush()
        return qr

    def find(self, db: Session, *, user_id: int, qr_code_id: Optional[int]) -> Optional[Attendance]:
        stmt = select(Attendance).where(Attendance.user_id == user_id)
        if qr_code_id is not None:
            stmt = stmt.where(Attendance.qr_code_id == qr_code_id)
        return db.execute(stmt.order_by(Attendance.id).limit(1)).scalars().first()

    def list_for_workshop(self, db: Session, workshop_id: int):
        stmt = (
            select(Attendance)
            .join(QrCode, QrCode.id == Attendance.qr_code_id)
            .where(QrCode.workshop_id == workshop_id)
            .order_by(Attendance.date_time, Attendance.id)
        )
        return list(db.execute(stmt).scalars().all())

attendance_crud = CRUDAttendance(Attendance)
