"""Credential issuer: registration, login and signed session tokens.

Tokens only carry the user id and an expiry. Approval is looked up again on
every request, so revoking a user takes effect without waiting for expiry.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import AppError, ErrorKind
from app.models.user import User
from app.services import user_service

logger = logging.getLogger(__name__)

PENDING_APPROVAL_MESSAGE = "Your account is awaiting approval. Please wait for an administrator."


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else settings.JWT_EXPIRES_IN
    payload = {
        "sub": str(user_id),
        "userId": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> int:
    """Check signature and expiry; return the user id the token was issued for."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AppError(ErrorKind.token_expired, "Your session has expired. Please log in again.")
    except JWTError:
        raise AppError(ErrorKind.invalid_token, "Invalid token")

    user_id = claims.get("userId", claims.get("sub"))
    try:
        return int(user_id)
    except (TypeError, ValueError):
        raise AppError(ErrorKind.invalid_token, "Invalid token")


def resolve_acting_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise AppError(ErrorKind.invalid_token, "This account no longer exists")
    if not user.is_approved:
        raise AppError(ErrorKind.pending_approval, PENDING_APPROVAL_MESSAGE)
    return user


def register(db: Session, name: str, phone: str) -> tuple[User, Optional[str]]:
    """Create the account; a token is issued only if it is approved right away."""
    user = user_service.create_user(db, name, phone, auto_approve=settings.AUTO_APPROVE_USERS)
    token = create_access_token(user.id) if user.is_approved else None
    return user, token


def login(db: Session, name: str, phone: str) -> tuple[User, str]:
    user = user_service.get_by_credentials(db, name, phone)
    if not user.is_approved:
        logger.info("Login refused for pending user %s", user.id)
        raise AppError(ErrorKind.pending_approval, PENDING_APPROVAL_MESSAGE)

    logger.info("User %s (%s) logged in", user.id, user.name)
    return user, create_access_token(user.id)
