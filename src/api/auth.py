"""Authentication API endpoints."""

import logging
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.config import get_settings
from src.database import get_db
from src.errors import AuthenticationError, DependencyError, NotFoundError, ValidationError
from src.models.user import User
from src.schemas.auth import (
    AuthResponse,
    ForgotPassword,
    MessageResponse,
    ResetPassword,
    UpdateDetails,
    UpdatePassword,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.services.auth import (
    authenticate_user,
    clear_reset_token,
    create_access_token,
    create_user,
    find_user_by_reset_token,
    get_password_hash,
    get_user_by_email,
    get_user_by_id,
    issue_reset_token,
    verify_password,
)
from src.services.email import EmailDeliveryError, EmailMessage, EmailService, get_email_service

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

TOKEN_COOKIE = "token"


def send_token_response(response: Response, user: User) -> AuthResponse:
    """Issue a token, set it as an httpOnly cookie and return it in the body."""
    access_token = create_access_token(user.id)
    max_age = int(timedelta(days=settings.jwt_cookie_expire_days).total_seconds())
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=access_token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.post("/register", response_model=AuthResponse)
async def register(
    user_data: UserRegister,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    if get_user_by_email(db, user_data.email):
        raise ValidationError("Email already registered")

    password_hash = await run_in_threadpool(get_password_hash, user_data.password)
    user = create_user(db, user_data.name, user_data.email, password_hash, user_data.role)

    return send_token_response(response, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    if not credentials.email or not credentials.password:
        raise ValidationError("Please provide an email and password")

    user = await run_in_threadpool(authenticate_user, db, credentials.email, credentials.password)
    if not user:
        logger.info("Failed login attempt")
        raise AuthenticationError("Invalid credentials")

    return send_token_response(response, user)


@router.get("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Overwrite the token cookie so the browser drops it within seconds."""
    response.set_cookie(
        key=TOKEN_COOKIE,
        value="none",
        max_age=10,
        expires=10,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return MessageResponse()


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.put("/updatedetails", response_model=UserResponse)
async def update_details(
    details: UpdateDetails,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the current user's name and email. The password is untouched."""
    if details.email is not None and details.email != current_user.email:
        if get_user_by_email(db, details.email):
            raise ValidationError("Email already registered")
        current_user.email = details.email
    if details.name is not None:
        current_user.name = details.name

    db.commit()
    db.refresh(current_user)
    return current_user


@router.put("/updatepassword", response_model=AuthResponse)
async def update_password(
    passwords: UpdatePassword,
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change password after confirming the current one."""
    user = get_user_by_id(db, current_user.id, include_password=True)

    matches = await run_in_threadpool(
        verify_password, passwords.current_password, user.password_hash
    )
    if not matches:
        raise AuthenticationError("Password is incorrect")

    user.password_hash = await run_in_threadpool(get_password_hash, passwords.new_password)
    db.commit()
    db.refresh(user)

    return send_token_response(response, user)


@router.post("/forgotpassword", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPassword,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """Email a single-use password reset link."""
    user = get_user_by_email(db, payload.email)
    if not user:
        raise NotFoundError("There is no user with that email")

    reset_token = issue_reset_token(user)
    db.commit()

    reset_url = str(request.url_for("reset_password", resettoken=reset_token))
    message = EmailMessage(
        to=user.email,
        subject="Password reset token",
        body=(
            "You are receiving this email because you (or someone else) has requested "
            f"the reset of a password. Please make a PUT request to:\n\n{reset_url}\n\n"
            f"The link expires in {settings.reset_token_expire_minutes} minutes."
        ),
    )

    try:
        await run_in_threadpool(email_service.send, message)
    except EmailDeliveryError:
        clear_reset_token(user)
        db.commit()
        raise DependencyError("Email could not be sent") from None

    return MessageResponse(data="Email sent")


@router.put("/resetpassword/{resettoken}", response_model=AuthResponse, name="reset_password")
async def reset_password(
    resettoken: str,
    payload: ResetPassword,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Set a new password using a reset token. The token is consumed."""
    user = find_user_by_reset_token(db, resettoken)
    if not user:
        raise ValidationError("Invalid token")

    # New hash and cleared token land in the same commit
    user.password_hash = await run_in_threadpool(get_password_hash, payload.password)
    clear_reset_token(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Password reset completed for user {user.id}")

    return send_token_response(response, user)
