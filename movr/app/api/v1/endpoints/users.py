"""
User API Endpoints.

Registration, profile lookup, login and account deletion.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from movr.app.db.session import get_db
from movr.app.db.transaction import atomic
from movr.app.schemas.user import UserRegister, UserLogin, UserResponse, UserProfileResponse, LoginResponse
from movr.app.schemas.vehicle import MessagesResponse
from movr.app.services import user_directory

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=MessagesResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    Returns 409 if the email is already registered.
    """
    async with atomic(db, "register_user"):
        await user_directory.register_user(
            db,
            email=user_data.email,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone_numbers=user_data.phone_numbers
        )

    return MessagesResponse(messages=["User successfully created"])


@router.get("", response_model=UserProfileResponse)
async def profile(
    email: Optional[str] = Query(None, description="Email of the user"),
    db: AsyncSession = Depends(get_db)
):
    """Get a user's profile."""
    user_directory.require_email(email)
    user = await user_directory.get_user(db, email)
    return UserProfileResponse(user=UserResponse.model_validate(user), messages=[])


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    Log a user in.

    Any registered email is accepted; there are no passwords.
    """
    user_directory.require_email(credentials.email, "No email provided.")
    await user_directory.get_user(db, credentials.email)
    return LoginResponse(is_authenticated=True)


@router.delete("", response_model=MessagesResponse)
async def delete_account(
    email: Optional[str] = Query(None, description="Email of the user to delete"),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a user account.

    Returns 409 while the user has an active ride.
    """
    user_directory.require_email(email, "No email provided.")
    async with atomic(db, "delete_user"):
        await user_directory.delete_user(db, email)

    return MessagesResponse(messages=["You have successfully deleted your account."])
