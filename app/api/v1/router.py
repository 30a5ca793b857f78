# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1 import (
    auth,
    users,
    workshops,
    attendance,
    admin_users,
    payments,
)

api_router = APIRouter()

# -------- participante --------
api_router.include_router(auth.router,        prefix="/auth",             tags=["auth"])
api_router.include_router(users.router,       prefix="/users",            tags=["users"])
api_router.include_router(workshops.router,   prefix="/workshops",        tags=["workshops"])

# -------- admin --------
api_router.include_router(attendance.router,  prefix="/admin/attendance", tags=["attendance"])
api_router.include_router(admin_users.router, prefix="/admin/users",      tags=["admin-users"])

# -------- provedor de pagamento --------
api_router.include_router(payments.router,    prefix="/payments",         tags=["payments"])
