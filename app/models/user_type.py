from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base

ADMIN_TYPE = "Admin"
DEFAULT_TYPE = "Externo"

class UserType(Base):
    __tablename__ = "user_types"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(60), unique=True)

    users = relationship("User", back_populates="user_type")
