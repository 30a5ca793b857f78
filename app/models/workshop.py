from enum import Enum
from typing import List, Optional
from datetime import datetime
from sqlalchemy import ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base

class WorkshopStatus(str, Enum):
    active = "active"
    inactive = "inactive"

class Workshop(Base):
    __tablename__ = "workshops"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    # NULL ou 0 = ilimitado
    spots_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # cache; recalculado por COUNT(users) a cada inscrição
    spots_occupied: Mapped[int] = mapped_column(Integer, default=0)
    building: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    classroom: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=WorkshopStatus.active.value)
    instructor_user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", use_alter=True, name="fk_workshops_instructor_user_id_users"), nullable=True
    )
    instructor_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    level: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    tools: Mapped[Optional[List[str]]] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(server_default=func.now(), onupdate=func.now())

    instructor = relationship("User", foreign_keys=[instructor_user_id])
    participants = relationship("User", foreign_keys="User.workshop_id", back_populates="workshop")
