# app/db/init_db.py
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security_password import hash_password
from app.models.user import User, UserStatus
from app.models.user_type import ADMIN_TYPE, UserType

logger = logging.getLogger(__name__)

TYPE_NAMES = ["Estudiante", "Docente", "Ponente/Tallerista", "Externo", ADMIN_TYPE]

def init_db(db: Session) -> None:
    types = {t.name: t for t in db.scalars(select(UserType)).all()}
    for name in TYPE_NAMES:
        if name not in types:
            t = UserType(name=name)
            db.add(t); db.flush()
            types[name] = t

    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    admin = db.scalar(select(User).where(User.email == email))
    if not admin:
        admin = User(
            name="Admin",
            email=email,
            hashed_password=hash_password(settings.SEED_ADMIN_PASSWORD),
            status=UserStatus.active.value,
            status_event=True,
            user_type_id=types[ADMIN_TYPE].id,
        )
        db.add(admin)
        logger.info("seed: admin user %s created", email)

    db.commit()
