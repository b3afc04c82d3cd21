"""
User directory service.

Users are keyed by email and are never updated after registration.
"""

from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from movr.app.core.exceptions import ResourceNotFoundError, ConflictError, BadRequestError
from movr.app.models.user import User
from movr.app.models.ride import Ride


def require_email(email: str, message: str = "No user email provided.") -> str:
    """
    Reject a missing or blank email.

    Raises:
        BadRequestError: If email is None or empty
    """
    if email is None or not email.strip():
        raise BadRequestError(message)
    return email


async def get_user(db: AsyncSession, email: str) -> User:
    """
    Load a user by email.

    Raises:
        ResourceNotFoundError: If no user has this email
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user:
        raise ResourceNotFoundError("User", message=f"No user found with email {email}")

    return user


async def register_user(
    db: AsyncSession,
    email: str,
    first_name: str,
    last_name: str,
    phone_numbers: List[str]
) -> User:
    """
    Create a user.

    Raises:
        ConflictError: If the email is already registered
    """
    existing = await db.execute(select(User.email).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("User not created: user already exists", details={"email": email})

    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone_numbers=list(phone_numbers)
    )
    db.add(user)
    await db.flush()
    return user


async def delete_user(db: AsyncSession, email: str) -> None:
    """
    Delete a user. Past rides keep their row with the user reference cleared.

    Raises:
        ResourceNotFoundError: If the user does not exist
        ConflictError: If the user is on an active ride
    """
    user = await get_user(db, email)

    active = await db.execute(
        select(Ride.id).where(Ride.user_email == email, Ride.end_ts.is_(None)).limit(1)
    )
    if active.scalar_one_or_none() is not None:
        raise ConflictError(
            "Cannot delete account while a ride is active",
            details={"email": email}
        )

    await db.execute(
        update(Ride).where(Ride.user_email == email).values(user_email=None)
    )
    await db.delete(user)
    await db.flush()
