# app/api/v1/users.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.enrollment import EnrollWorkshopIn, EnrollWorkshopOut
from app.schemas.user import UserMe
from app.services.enrollment import EnrollmentService
from app.services.qr import qr_png_bytes, qr_value_for
from app.services.workshop_directory import is_payment_eligible

router = APIRouter()

@router.get("/me", response_model=UserMe)
def read_me(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    data = UserMe.model_validate(user, from_attributes=True)
    data.payment_eligible = is_payment_eligible(db, user)
    return data

@router.post("/me/workshop", response_model=EnrollWorkshopOut)
def enroll_me(
    body: EnrollWorkshopIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return EnrollmentService(db).enroll(user.id, body.workshopId)

@router.get("/me/qr", response_class=Response)
def my_qr(user: User = Depends(get_current_user)):
    png = qr_png_bytes(qr_value_for(user))
    return Response(content=png, media_type="image/png", headers={"Cache-Control": "no-store"})
