"""Request dependencies: acting identity from the bearer token, admin gate."""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AppError, ErrorKind
from app.models.user import User
from app.services import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the token to an existing, approved user (checked on every request)."""
    if credentials is None or not credentials.credentials:
        raise AppError(ErrorKind.invalid_token, "An authentication token is required")
    user_id = auth_service.verify_token(credentials.credentials)
    return auth_service.resolve_acting_user(db, user_id)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise AppError(ErrorKind.forbidden, "Administrator privileges are required")
    return current_user
