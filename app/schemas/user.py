# app/schemas/user.py
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

class UserOut(BaseModel):
    id: int
    name: str
    full_name: str
    email: str          # str e não EmailStr: e-mails legados não normalizados
    matricula: Optional[str] = None
    phone: Optional[str] = None
    type_name: str
    status: str
    status_event: bool = False
    workshop_id: Optional[int] = None

    model_config = {"from_attributes": True}

class UserMe(UserOut):
    payment_eligible: bool = False
