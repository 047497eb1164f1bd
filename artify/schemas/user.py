# artify/schemas/user.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from artify.core.security import Role


class RegisterRequest(BaseModel):
    role: Role
    email: EmailStr
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    dob: Optional[date] = None
    phone_no: Optional[str] = None
    address: Optional[str] = None

    # editors only
    skills: Optional[str] = None
    experience: Optional[str] = None
    portfolio: Optional[str] = None
    awards: Optional[str] = None


class LoginRequest(BaseModel):
    role: Role
    email: EmailStr
    password: str
    remember: bool = False


class EditorCreate(BaseModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    dob: Optional[date] = None
    phone_no: Optional[str] = None
    address: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None
    portfolio: Optional[str] = None
    awards: Optional[str] = None


class PrincipalResponse(BaseModel):
    id: int
    role: Role
    email: EmailStr
    name: str


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    phone_no: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EditorResponse(UserResponse):
    skills: Optional[str] = None
    experience: Optional[str] = None
    portfolio: Optional[str] = None
    awards: Optional[str] = None

    class Config:
        from_attributes = True
