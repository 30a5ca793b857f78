# app/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field
from app.schemas.user import UserOut

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
