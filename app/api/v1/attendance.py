# app/api/v1/attendance.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.rbac import require_admin
from app.schemas.attendance import ScanQrIn, ScanQrOut, ScannerWorkshopList, UsersByTypeOut
from app.services.attendance import AttendanceRecorder

router = APIRouter(dependencies=[Depends(require_admin)])

@router.post("/scan-qr", response_model=ScanQrOut)
def scan_qr(body: ScanQrIn, db: Session = Depends(get_db)):
    # scheduleId é aceito por compatibilidade com o leitor; não há agenda por horário
    return AttendanceRecorder(db).scan(body.qrValue, workshop_id=body.workshopId)

@router.get("/workshops", response_model=ScannerWorkshopList)
def scanner_workshops(db: Session = Depends(get_db)):
    return AttendanceRecorder(db).list_workshops()

@router.get("/workshops/{workshop_id}/users-by-type", response_model=UsersByTypeOut)
def users_by_type(workshop_id: int, db: Session = Depends(get_db)):
    return AttendanceRecorder(db).users_by_type(workshop_id)
