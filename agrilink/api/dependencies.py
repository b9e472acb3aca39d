"""Auth Dependencies — resolve the calling user from a Bearer token or the auth cookie.

Invariants:
    - The user row is reloaded on every request; token claims are never trusted
      for role or restriction state
    - Restricted accounts get 403 on every authenticated route
    - Admin routes require user_type == admin
"""

import uuid

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.config import get_settings
from agrilink.core.domain_types import UserType
from agrilink.core.errors import AuthenticationError, PermissionDeniedError
from agrilink.infrastructure.database import get_db
from agrilink.infrastructure.security import decode_access_token
from agrilink.models.user import User


def _extract_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(get_settings().auth_cookie_name)


async def get_current_user(
    request: Request, db: AsyncSession = Depends(get_db),
) -> User:
    token = _extract_token(request)
    if not token:
        raise AuthenticationError()
    payload = decode_access_token(token)
    try:
        user_id = uuid.UUID(payload["user_id"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")

    user = await db.get(User, user_id)
    if not user:
        raise AuthenticationError("User not found")
    if user.is_restricted:
        raise PermissionDeniedError("Your account has been restricted")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.user_type != UserType.ADMIN.value:
        raise PermissionDeniedError("Admin access required")
    return user
