"""User administration API routes (admin only)."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import require_admin
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import PendingUserOut, UserOut, UserUpdate
from app.services import user_service
from app.services.user_service import UserPatch

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=ApiResponse[list[UserOut]])
def list_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """List all users, newest first."""
    return ApiResponse(data=[UserOut.model_validate(u) for u in user_service.list_users(db)])


@router.get("/pending", response_model=ApiResponse[list[PendingUserOut]])
def list_pending(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Users waiting for approval, oldest first."""
    return ApiResponse(data=[PendingUserOut.model_validate(u) for u in user_service.list_pending(db)])


@router.patch("/{user_id}/approve", response_model=ApiResponse[UserOut])
def approve_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = user_service.approve_user(db, user_id)
    return ApiResponse(message=f"{user.name} has been approved", data=UserOut.model_validate(user))


@router.patch("/{user_id}/revoke", response_model=ApiResponse[UserOut])
def revoke_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = user_service.revoke_user(db, user_id, admin)
    return ApiResponse(message=f"Approval of {user.name} has been revoked", data=UserOut.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[UserOut])
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Update only the supplied fields."""
    patch = UserPatch(
        name=payload.name,
        phone=payload.phone,
        is_approved=payload.is_approved,
        is_admin=payload.is_admin,
    )
    user = user_service.update_user(db, user_id, patch, admin)
    return ApiResponse(message="User updated", data=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=ApiResponse[dict])
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete a user with their schedules and participations."""
    name = user_service.delete_user(db, user_id, admin)
    return ApiResponse(message=f"{name} has been deleted", data={"id": user_id})
