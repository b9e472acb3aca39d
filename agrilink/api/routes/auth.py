"""Auth Routes — registration, login/logout, current user and credential flows.

Invariants:
    - Login and register set the HTTP-only auth cookie alongside the JSON token
    - Password reset requests answer identically for known and unknown emails
    - An email change needs the current password and is applied on confirmation
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.config import get_settings
from agrilink.core.password_strength import calculate_strength, check_requirements
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.auth import (
    ChangePasswordRequest, EmailChangeRequest, LoginRequest, PasswordResetRequest,
    PasswordStrengthRequest, RegisterRequest, ResetPasswordRequest,
    VerifyEmailRequest,
)
from agrilink.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.auth_cookie_name, token,
        httponly=True, samesite="lax",
        secure=settings.app_url.startswith("https"),
        max_age=settings.jwt_expiry_days * 24 * 60 * 60,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest, response: Response, db: AsyncSession = Depends(get_db),
):
    user, token = await AuthService(db).register(body)
    _set_auth_cookie(response, token)
    return {
        "user": serializers.current_user(user),
        "token": token,
        "message": "Registration successful. Please check your email to verify your account.",
    }


@router.post("/login")
async def login(
    body: LoginRequest, response: Response, db: AsyncSession = Depends(get_db),
):
    user, token = await AuthService(db).login(body.email, body.password)
    _set_auth_cookie(response, token)
    return {
        "user": serializers.current_user(user),
        "token": token,
        "message": "Login successful",
    }


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(get_settings().auth_cookie_name)
    return {"message": "Logged out"}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"user": serializers.current_user(user)}


@router.post("/verify-email")
async def verify_email(body: VerifyEmailRequest, db: AsyncSession = Depends(get_db)):
    user = await AuthService(db).verify_email(body.token)
    return {"message": "Email verified successfully", "user": serializers.current_user(user)}


@router.post("/resend-verification")
async def resend_verification(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    await AuthService(db).resend_verification(user)
    return {"message": "Verification email sent"}


@router.post("/request-password-reset")
async def request_password_reset(
    body: PasswordResetRequest, db: AsyncSession = Depends(get_db),
):
    message = await AuthService(db).request_password_reset(body.email)
    return {"message": message}


@router.post("/reset-password")
async def reset_password(body: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    await AuthService(db).reset_password(body.token, body.new_password)
    return {"message": "Password has been reset successfully"}


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await AuthService(db).change_password(user, body.current_password, body.new_password)
    return {"message": "Password changed successfully"}


@router.post("/update-email")
async def update_email(
    body: EmailChangeRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await AuthService(db).request_email_change(
        user, body.new_email, body.current_password,
    )
    return {"message": "Verification email sent to your new address"}


@router.post("/verify-email-change")
async def verify_email_change(body: VerifyEmailRequest, db: AsyncSession = Depends(get_db)):
    user = await AuthService(db).confirm_email_change(body.token)
    return {"message": "Email updated successfully", "user": serializers.current_user(user)}


@router.post("/password-strength")
async def password_strength(body: PasswordStrengthRequest):
    strength = calculate_strength(body.password)
    return {
        "score": strength.score,
        "label": strength.label,
        "feedback": strength.feedback,
        "is_valid": strength.is_valid,
        "requirements": check_requirements(body.password),
    }
