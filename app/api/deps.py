from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.models.user import User, UserStatus
from app.core.tokens import decode_access

__all__ = ["get_db", "get_bearer_token", "get_current_user"]

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (sem usar OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def _parse_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1]

def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    token = _parse_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    return token

def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_access(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.get(User, user_id, options=[joinedload(User.user_type)])
    if not user or user.status in {UserStatus.deleted.value, UserStatus.suspended.value}:
        raise HTTPException(status_code=401, detail="Usuário não encontrado")
    return user
