# app/schemas/workshop.py
from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

class WorkshopOut(BaseModel):
    workshop_id: int
    name: str
    description: str = ""
    spots_max: int = 0
    spots_occupied: int = 0
    available_spots: Optional[int] = None   # null = ilimitado
    building: str = ""
    classroom: str = ""
    status: str
    instructor_user_id: Optional[int] = None
    instructor_name: str = ""
    level: Optional[str] = None
    category: Optional[str] = None
    tools: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # estado do botão para quem está olhando
    is_user_enrolled: bool = False
    can_enroll: bool = False
    enrollment_status: str
    button_text: str
    button_disabled: bool
    button_type: str
