"""Auth API routes: registration, login and the current session."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_user
from app.models.user import User
from app.schemas.auth import Credentials, MeOut, SessionOut
from app.schemas.common import ApiResponse
from app.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _session(user: User, token=None) -> SessionOut:
    return SessionOut(
        user_id=user.id,
        name=user.name,
        phone=user.phone,
        is_approved=user.is_approved,
        is_admin=user.is_admin,
        token=token,
    )


@router.post("/register", response_model=ApiResponse[SessionOut], status_code=status.HTTP_201_CREATED)
def register(payload: Credentials, db: Session = Depends(get_db)):
    """Create an account; only approved accounts get a token right away."""
    user, token = auth_service.register(db, payload.name, payload.phone)
    if user.is_admin:
        message = "Registration complete. You are the first member and have been made administrator."
    elif token:
        message = "Registration complete."
    else:
        message = "Registration complete. Please wait for an administrator to approve your account."
    return ApiResponse(message=message, data=_session(user, token))


@router.post("/login", response_model=ApiResponse[SessionOut])
def login(payload: Credentials, db: Session = Depends(get_db)):
    user, token = auth_service.login(db, payload.name, payload.phone)
    return ApiResponse(message="Logged in", data=_session(user, token))


@router.get("/me", response_model=ApiResponse[MeOut])
def me(current_user: User = Depends(get_current_user)):
    """The acting user behind the bearer token."""
    return ApiResponse(
        data=MeOut(
            user_id=current_user.id,
            name=current_user.name,
            phone=current_user.phone,
            is_approved=current_user.is_approved,
            is_admin=current_user.is_admin,
        )
    )
