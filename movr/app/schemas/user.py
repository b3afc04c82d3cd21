"""
User Pydantic schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class UserRegister(BaseModel):
    """Schema for user registration."""
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_numbers: List[str] = Field(default_factory=list)


class UserLogin(BaseModel):
    """Schema for login. Only the email is checked."""
    email: Optional[str] = None


class UserResponse(BaseModel):
    email: str
    first_name: str
    last_name: str
    phone_numbers: List[str]

    class Config:
        from_attributes = True


class UserProfileResponse(BaseModel):
    user: UserResponse
    messages: List[str]


class LoginResponse(BaseModel):
    is_authenticated: bool
