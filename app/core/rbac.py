# app/core/rbac.py
from fastapi import Depends, HTTPException, status
from app.api.deps import get_current_user
from app.models.user_type import ADMIN_TYPE

def require_types(*type_names: str):
    allowed = {n.lower() for n in type_names}
    def dep(user = Depends(get_current_user)):
        if (user.type_name or "").lower() not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Perfil sem permissão")
        return user
    return dep

require_admin = require_types(ADMIN_TYPE)
