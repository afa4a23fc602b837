"""
Authentication endpoints: register, login, logout and current user.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tigertix.core.config import get_settings
from tigertix.core.security import get_current_user_id
from tigertix.db.session import get_db
from tigertix.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from tigertix.services.auth_service import authenticate_user, get_user, register_user

settings = get_settings()
router = APIRouter(prefix="/auth", tags=["Authentication"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT == "production",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, response: Response, db: AsyncSession = Depends(get_db)):
    """Register a new account and start a session."""
    user, token = await register_user(db, user_data)
    _set_session_cookie(response, token)
    return AuthResponse(message="Registration successful", user=UserResponse.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin, response: Response, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT, also set as an httponly cookie."""
    user, token = await authenticate_user(db, login_data)
    _set_session_cookie(response, token)
    return AuthResponse(message="Login successful", user=UserResponse.model_validate(user), token=token)


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME, httponly=True, samesite="lax")
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def me(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await get_user(db, user_id)
