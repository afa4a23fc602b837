"""
Authentication service handling user registration and login.
"""

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.logging import get_logger
from tigertix.core.security import create_access_token, hash_password, verify_password
from tigertix.models.user import User
from tigertix.schemas.user import UserCreate, UserLogin

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, user_data: UserCreate) -> tuple[User, str]:
    """
    Register a new user with a bcrypt-hashed password.
    Raises 409 if the email is already registered.
    """
    email = normalize_email(user_data.email)
    if await get_user_by_email(db, email):
        logger.warning("registration_failed", reason="email_exists", email=email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with that email already exists",
        )

    user = User(email=email, password_hash=hash_password(user_data.password))
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user, create_access_token(data={"sub": str(user.id), "email": user.email})


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> tuple[User, str]:
    """
    Verify credentials and issue a JWT access token.
    Raises 401 without revealing which half of the credentials was wrong.
    """
    user = await get_user_by_email(db, login_data.email)

    if not user or not verify_password(login_data.password, user.password_hash):
        logger.warning("login_failed", email=normalize_email(login_data.email))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("user_logged_in", user_id=user.id)
    return user, create_access_token(data={"sub": str(user.id), "email": user.email})


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
        )
    return user
