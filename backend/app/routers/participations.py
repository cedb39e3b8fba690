"""Participation API routes: a member's own status, and admin edits of others."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_user, require_admin
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.participation import ParticipationOut, StatusIn
from app.services import participation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{schedule_id}/participate", response_model=ApiResponse[ParticipationOut])
def set_status(
    schedule_id: int,
    payload: StatusIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Set or change the acting user's status (Attending, NotAttending, Undecided)."""
    participation_service.set_status(db, schedule_id, current_user, payload.status)
    return ApiResponse(
        message=f'Participation status set to "{payload.status.value}"',
        data=ParticipationOut(schedule_id=schedule_id, user_id=current_user.id, status=payload.status),
    )


@router.delete("/{schedule_id}/participate", response_model=ApiResponse[ParticipationOut])
def withdraw(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove the acting user's status row entirely."""
    participation_service.withdraw(db, schedule_id, current_user)
    return ApiResponse(
        message="Participation removed",
        data=ParticipationOut(schedule_id=schedule_id, user_id=current_user.id),
    )


@router.post("/{schedule_id}/participate/{user_id}", response_model=ApiResponse[ParticipationOut])
def set_status_for(
    schedule_id: int,
    user_id: int,
    payload: StatusIn,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    participation = participation_service.set_status_for(db, schedule_id, user_id, payload.status, admin)
    name = participation.user_name
    return ApiResponse(
        message=f'Participation status of {name} set to "{payload.status.value}"',
        data=ParticipationOut(schedule_id=schedule_id, user_id=user_id, user_name=name, status=payload.status),
    )


@router.delete("/{schedule_id}/participate/{user_id}", response_model=ApiResponse[ParticipationOut])
def remove_participant(
    schedule_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    name = participation_service.remove_participant(db, schedule_id, user_id, admin)
    return ApiResponse(
        message=f"{name} was removed from the participant list",
        data=ParticipationOut(schedule_id=schedule_id, user_id=user_id, user_name=name),
    )
