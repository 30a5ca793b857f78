# app/schemas/admin_user.py
from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

class ActivationIn(BaseModel):
    activate: bool
    force: bool = False
    reason: Optional[str] = Field(default=None, max_length=500)
    status_event: Optional[bool] = None

class BulkActivationIn(BaseModel):
    ids: List[int] = Field(default_factory=list)
    activate: bool
    force: bool = False
    status_event: Optional[bool] = None

class AdminUserRow(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    code: str
    provenance: Optional[str] = None
    educational_program: Optional[str] = None
    grade: Optional[str] = None
    group: Optional[str] = None
    type: str
    isActive: bool
    eventEnabled: bool
    status_event: bool
    isBadgePrinted: bool
    workshop_id: Optional[int] = None
    paymentStatus: str

class AdminUserPage(BaseModel):
    total: int
    total_filtro: int
    page: int
    pageSize: int
    data: List[AdminUserRow]
