# app/api/v1/workshops.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.models.user import User
from app.schemas.workshop import WorkshopOut
from app.services.workshop_directory import WorkshopDirectory

router = APIRouter()

# -------- rotas públicas (antes de /{workshop_id}) --------
@router.get("/public", response_model=List[WorkshopOut])
def list_public(db: Session = Depends(get_db)):
    return WorkshopDirectory(db).list_workshops()

@router.get("/public/{workshop_id}", response_model=WorkshopOut)
def get_public(workshop_id: int, db: Session = Depends(get_db)):
    return WorkshopDirectory(db).get_workshop(workshop_id)

@router.get("/available/public", response_model=List[WorkshopOut])
def list_available_public(db: Session = Depends(get_db)):
    return WorkshopDirectory(db).list_available_workshops()

# -------- rotas autenticadas --------
@router.get("/available/list", response_model=List[WorkshopOut])
def list_available(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return WorkshopDirectory(db).list_available_workshops(viewer_id=user.id)

@router.get("", response_model=List[WorkshopOut])
def list_workshops(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return WorkshopDirectory(db).list_workshops(viewer_id=user.id)

@router.get("/{workshop_id}", response_model=WorkshopOut)
def get_workshop(workshop_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return WorkshopDirectory(db).get_workshop(workshop_id, viewer_id=user.id)
