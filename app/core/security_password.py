# app/core/security_password.py
from __future__ import annotations
import logging
from typing import Optional, Tuple
from passlib.context import CryptContext
from passlib.exc import UnknownHashError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["argon2", "bcrypt_sha256", "bcrypt"],
    deprecated="auto",
    argon2__time_cost=2,
    argon2__memory_cost=19456,
    argon2__parallelism=1,
)

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def verify_and_maybe_upgrade(plain: str, stored_hash: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    (ok, novo_hash). novo_hash vem preenchido quando o hash salvo usa
    parâmetros antigos (ex.: bcrypt de usuários importados) e deve ser regravado.
    """
    if not stored_hash:
        return False, None
    try:
        ok = pwd_context.verify(plain, stored_hash)
    except (UnknownHashError, ValueError):
        # cadastro importado com hash em formato desconhecido: trata como senha errada
        logger.warning("stored password hash in unknown format")
        return False, None
    if not ok:
        return False, None
    if pwd_context.needs_update(stored_hash):
        return True, pwd_context.hash(plain)
    return True, None
