# app/schemas/attendance.py
from __future__ import annotations
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field


class ScanQrIn(BaseModel):
    # o leitor antigo ainda manda "token"
    qrValue: Optional[str] = Field(default=None, validation_alias=AliasChoices("qrValue", "token"))
    workshopId: Optional[int] = None
    scheduleId: Optional[int] = None


# ---- referências “lite” usadas nas respostas ----

class WorkshopRef(BaseModel):
    id: int
    name: str
    building: Optional[str] = None
    classroom: Optional[str] = None
    category: Optional[str] = None


class AttendeeRef(BaseModel):
    id: int
    name: str
    email: str
    matricula: Optional[str] = None
    type: str
    status_event: bool


class ScanQrOut(BaseModel):
    status: str   # ok | already_registered
    message: str
    attendanceId: int
    at: Optional[datetime] = None
    user: AttendeeRef
    workshop: Optional[WorkshopRef] = None


class ScannerWorkshop(WorkshopRef):
    status: str


class ScannerWorkshopList(BaseModel):
    workshops: List[ScannerWorkshop]


class WorkshopAttendee(AttendeeRef):
    attended: bool
    attendance_time: Optional[datetime] = None


class UsersByTypeOut(BaseModel):
    workshop: WorkshopRef
    all: List[WorkshopAttendee]
    byType: Dict[str, List[WorkshopAttendee]]
