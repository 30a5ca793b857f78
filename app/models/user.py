from enum import Enum
from typing import Optional
from datetime import datetime
from sqlalchemy import Boolean, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base
from app.models.user_type import DEFAULT_TYPE

class UserStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"
    deleted = "deleted"

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120))
    paternal_surname: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    maternal_surname: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    email: Mapped[str] = mapped_column(String(160), unique=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    matricula: Mapped[Optional[str]] = mapped_column(String(40), unique=True, nullable=True)
    educational_program: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    provenance: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    grade: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    group_name: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=UserStatus.active.value)
    # elegibilidade de pagamento (webhook ou ativação manual do admin)
    status_event: Mapped[bool] = mapped_column(Boolean, default=False)
    is_badge_printed: Mapped[bool] = mapped_column(Boolean, default=False)
    user_type_id: Mapped[Optional[int]] = mapped_column(ForeignKey("user_types.id"), nullable=True)
    # no máximo uma oficina por usuário
    workshop_id: Mapped[Optional[int]] = mapped_column(ForeignKey("workshops.id"), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    user_type = relationship("UserType", back_populates="users")
    workshop = relationship("Workshop", foreign_keys=[workshop_id], back_populates="participants")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.name, self.paternal_surname, self.maternal_surname) if p)

    @property
    def type_name(self) -> str:
        return self.user_type.name if self.user_type else DEFAULT_TYPE
