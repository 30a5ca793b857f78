# app/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.security_password import verify_and_maybe_upgrade
from app.core.tokens import create_access_token
from app.crud.user import user_crud
from app.models.user import UserStatus
from app.schemas.auth import LoginIn, TokenOut
from app.schemas.user import UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------- helpers ----------
def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

@router.post("/login", response_model=TokenOut)
def login(body: LoginIn, db: Session = Depends(get_db)):
    email = normalize_email(body.email)
    user = user_crud.get_by_email(db, email)
    if not user:
        raise HTTPException(status_code=401, detail="Credenciais inválidas")

    ok, new_hash = verify_and_maybe_upgrade(body.password, user.hashed_password)
    if not ok:
        logger.info("login failed for %s", email)
        raise HTTPException(status_code=401, detail="Credenciais inválidas")
    if user.status != UserStatus.active.value:
        raise HTTPException(status_code=401, detail="Usuário inativo")

    if new_hash:
        # rehash transparente (parâmetros do argon2 mudaram)
        user.hashed_password = new_hash
        db.add(user); db.commit(); db.refresh(user)

    token = create_access_token(sub=str(user.id), scope=user.type_name)
    return TokenOut(access_token=token, user=UserOut.model_validate(user))
