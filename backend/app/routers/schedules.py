"""Schedule API routes: delegates to schedule_service for ownership and time checks."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_user
from app.models.schedule import Schedule
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.schedule import (
    MyParticipationOut,
    ScheduleDetail,
    ScheduleIn,
    ScheduleOut,
    ScheduleSummary,
)
from app.services import schedule_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _summary(schedule: Schedule, participant_count: int, confirmed_count: int) -> ScheduleSummary:
    fields = ScheduleOut.model_validate(schedule).model_dump()
    return ScheduleSummary(**fields, participant_count=participant_count, confirmed_count=confirmed_count)


@router.get("", response_model=ApiResponse[list[ScheduleSummary]])
def list_schedules(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12, description="Only applied together with year"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List schedules by date and start time, with participant counts."""
    rows = schedule_service.list_schedules(db, year=year, month=month)
    return ApiResponse(data=[_summary(*row) for row in rows])


# Declared before /{schedule_id} so the literal path wins
@router.get("/my-participations", response_model=ApiResponse[list[MyParticipationOut]])
def my_participations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Schedules the acting user has a status on."""
    rows = schedule_service.list_my_participations(db, current_user.id)
    data = [
        MyParticipationOut(**ScheduleOut.model_validate(schedule).model_dump(), my_status=my_status)
        for schedule, my_status in rows
    ]
    return ApiResponse(data=data)


@router.get("/{schedule_id}", response_model=ApiResponse[ScheduleDetail])
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    schedule = schedule_service.get_schedule_detail(db, schedule_id)
    return ApiResponse(data=ScheduleDetail.model_validate(schedule))


@router.post("", response_model=ApiResponse[ScheduleOut], status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    schedule = schedule_service.create_schedule(db, payload.model_dump(), current_user)
    return ApiResponse(message="Schedule created", data=ScheduleOut.model_validate(schedule))


@router.put("/{schedule_id}", response_model=ApiResponse[ScheduleOut])
def update_schedule(
    schedule_id: int,
    payload: ScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Replace a schedule (creator or admin only)."""
    schedule = schedule_service.update_schedule(db, schedule_id, payload.model_dump(), current_user)
    return ApiResponse(message="Schedule updated", data=ScheduleOut.model_validate(schedule))


@router.delete("/{schedule_id}", response_model=ApiResponse[dict])
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a schedule and all of its participations (creator or admin only)."""
    title = schedule_service.delete_schedule(db, schedule_id, current_user)
    return ApiResponse(message=f"Schedule '{title}' deleted", data={"id": schedule_id})
