import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, get_current_user
from app.db.models.user import User
from app.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    LogoutRequest,
    RegisterRequest,
    SuccessResponse,
    UserResponse,
)
from app.services.auth_service import login_user, register_user, revoke_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ USER REGISTRATION
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user, auth_session = register_user(
        db,
        email=payload.email,
        password=payload.password,
        confirm_password=payload.confirm_password,
        name=payload.name,
    )
    return AuthResponse(token=auth_session.token, user=UserResponse.model_validate(user))


# ✅ LOGIN (JSON body, issues a new token per device)
@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, auth_session = login_user(db, email=payload.email, password=payload.password)
    return AuthResponse(token=auth_session.token, user=UserResponse.model_validate(user))


# ✅ LOGOUT (always succeeds, even for unknown tokens)
@router.post("/logout", response_model=SuccessResponse)
def logout(payload: LogoutRequest, db: Session = Depends(get_db)):
    revoke_token(db, payload.token)
    return SuccessResponse()


@router.get("/me", response_model=CurrentUserResponse)
def me(user: User = Depends(get_current_user)):
    return CurrentUserResponse(user=UserResponse.model_validate(user))
