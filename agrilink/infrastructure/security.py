"""Credentials — password hashing, JWT issue/verify and one-time tokens.

Invariants:
    - Passwords are only ever stored as werkzeug hashes
    - Access tokens carry user_id, email, user_type, account_type and an exp claim
    - Any decode failure (bad signature, expired, malformed) → AuthenticationError
"""

import secrets
from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from agrilink.config import get_settings
from agrilink.core.errors import AuthenticationError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str | None, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def generate_token() -> str:
    """Random token for email verification and password reset links."""
    return secrets.token_hex(32)


def create_access_token(
    user_id: str, email: str, user_type: str, account_type: str,
) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": str(user_id),
        "email": email,
        "user_type": user_type,
        "account_type": account_type,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")
    if "user_id" not in payload:
        raise AuthenticationError("Invalid token")
    return payload
