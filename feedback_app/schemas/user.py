from datetime import datetime
from typing import Optional

from pydantic import BaseModel

class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class UserPublic(BaseModel):
    """A user as returned by the API, without the password hash"""
    id: str
    name: str
    email: str
    createdAt: Optional[datetime] = None
