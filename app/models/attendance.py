from typing import Optional
from datetime import datetime
from sqlalchemy import ForeignKey, Index, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base

class Attendance(Base):
    __tablename__ = "attendances"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    qr_code_id: Mapped[Optional[int]] = mapped_column(ForeignKey("qr_codes.id"), nullable=True, index=True)
    date_time: Mapped[datetime] = mapped_column(server_default=func.now())

    user = relationship("User")
    qr_code = relationship("QrCode")

# uma presença por (usuário, escopo); escopo NULL = check-in geral
Index(
    "uq_attendances_user_scope",
    Attendance.user_id,
    func.coalesce(Attendance.qr_code_id, 0),
    unique=True,
)
