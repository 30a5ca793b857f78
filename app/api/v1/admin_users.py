# app/api/v1/admin_users.py
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.rbac import require_admin
from app.schemas.admin_user import ActivationIn, AdminUserPage, BulkActivationIn
from app.services.admin_users import AdminUserDirectory

router = APIRouter(dependencies=[Depends(require_admin)])

@router.get("", response_model=AdminUserPage)
def list_users(
    q: Optional[str] = Query(None),
    filter: Optional[str] = Query(None),
    grade: Optional[str] = Query(None),
    group: Optional[str] = Query(None),
    page: int = Query(1),
    pageSize: int = Query(20),
    db: Session = Depends(get_db),
):
    # limites validados no serviço (400, não 422)
    return AdminUserDirectory(db).list_users(
        q=q, filter=filter, grade=grade, group=group, page=page, page_size=pageSize,
    )

@router.get("/filter-options")
def filter_options(db: Session = Depends(get_db)):
    return AdminUserDirectory(db).filter_options()

@router.patch("/activation-bulk")
def activation_bulk(body: BulkActivationIn, db: Session = Depends(get_db)):
    updated = AdminUserDirectory(db).set_activation_bulk(
        body.ids, activate=body.activate, force=body.force, status_event=body.status_event,
    )
    return {"updated": updated, "count": len(updated)}

@router.patch("/{user_id}/activation")
def set_activation(user_id: int, body: ActivationIn, db: Session = Depends(get_db)):
    return AdminUserDirectory(db).set_activation(
        user_id,
        activate=body.activate,
        force=body.force,
        reason=body.reason,
        status_event=body.status_event,
    )

@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    return AdminUserDirectory(db).delete_user(user_id)
