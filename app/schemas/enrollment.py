# app/schemas/enrollment.py
from typing import Any, Optional
from pydantic import BaseModel, field_validator

class EnrollWorkshopIn(BaseModel):
    workshopId: Optional[int] = None

    @field_validator("workshopId", mode="before")
    @classmethod
    def _lenient_id(cls, v: Any):
        # valor inválido vira None; o serviço responde 400 (e não 422)
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, str) and v.strip().lstrip("-").isdigit():
            return int(v.strip())
        return None

class EnrollWorkshopOut(BaseModel):
    ok: bool
    message: str
    user_id: int
    workshop_id: int
    workshop_name: str
