from typing import Any, Dict, Optional
from datetime import datetime
from sqlalchemy import ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base

class Payment(Base):
    __tablename__ = "payments"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # id da sessão de checkout do provedor; chave do upsert do webhook
    session_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    payment_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    payment_intent_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    amount_total: Mapped[int] = mapped_column(Integer, default=0)
    currency: Mapped[str] = mapped_column(String(10), default="mxn")
    customer_email: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    client_reference_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    metadata_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(server_default=func.now(), onupdate=func.now())

    user = relationship("User")
