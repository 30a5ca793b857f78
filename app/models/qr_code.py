from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base

class QrCode(Base):
    """Escopo de check-in: o valor lido no QR dentro de uma oficina."""
    __tablename__ = "qr_codes"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    token: Mapped[str] = mapped_column(String(255))
    workshop_id: Mapped[int] = mapped_column(ForeignKey("workshops.id"), index=True)

    workshop = relationship("Workshop")

    __table_args__ = (UniqueConstraint("token", "workshop_id", name="uq_qr_code_token_workshop"),)
