"""Authentication endpoints (API JWT + auth cookie)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from hostel_food.core.config import settings
from hostel_food.core.security import create_access_token, get_current_user
from hostel_food.db.session import get_db
from hostel_food.models.user import User
from hostel_food.schemas.auth import (
    AuthUserResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from hostel_food.services.account_service import (
    FORGOT_PASSWORD_MESSAGE,
    AccountExistsError,
    AccountNotApprovedError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    InvalidUniversityError,
    authenticate_user,
    register_student,
    request_password_reset,
    reset_password,
)
from hostel_food.services.rate_limit import FORGOT_PASSWORD_RULE, LOGIN_RULE, REGISTER_RULE, rate_limited

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/register",
    response_model=AuthUserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limited(REGISTER_RULE))],
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthUserResponse:
    try:
        user = register_student(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            university_id=payload.university_id,
            phone=payload.phone,
        )
    except AccountExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except InvalidUniversityError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return AuthUserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse, dependencies=[Depends(rate_limited(LOGIN_RULE))])
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> TokenResponse:
    try:
        user: User = authenticate_user(db, payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except AccountNotApprovedError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": exc.message, "status": exc.status},
        ) from exc

    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        max_age=settings.jwt_expire_minutes * 60,
    )
    return TokenResponse(access_token=token, user=AuthUserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    response.delete_cookie(settings.auth_cookie_name)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=AuthUserResponse)
def me(current_user: User = Depends(get_current_user)) -> AuthUserResponse:
    return AuthUserResponse.model_validate(current_user)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limited(FORGOT_PASSWORD_RULE))],
)
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    request_password_reset(db, payload.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password_endpoint(payload: ResetPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    try:
        reset_password(db, payload.token, payload.password)
    except InvalidResetTokenError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Password updated")
