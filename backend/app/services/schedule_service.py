"""Core schedule service: ownership checks, time validation and read projections.

Responsibilities:
- Authorization hook: only the creator or an admin may update/delete
- Time window: start_time must be strictly before end_time
- Full replace on update (every editable field is rewritten)
- List/detail/"my participations" projections with participant counts
"""
import logging
from datetime import date, time
from typing import Any, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, joinedload, selectinload

from app.errors import AppError, ErrorKind
from app.models.participation import Participation, ParticipationStatus
from app.models.schedule import Schedule
from app.models.user import User

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "date", "start_time", "end_time", "location", "location_detail")


def _check_authorization(schedule: Schedule, acting_user: User, action: str) -> None:
    """Only the creator or an admin may modify a schedule."""
    if schedule.created_by != acting_user.id and not acting_user.is_admin:
        raise AppError(ErrorKind.forbidden, f"You do not have permission to {action} this schedule")


def _check_time_window(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise AppError(ErrorKind.validation_error, "End time must be later than start time")


def _month_range(year: int, month: Optional[int]) -> tuple[date, date]:
    """[first day, first day of the next period) for a year or a single month."""
    if month is None:
        return date(year, 1, 1), date(year + 1, 1, 1)
    if month == 12:
        return date(year, 12, 1), date(year + 1, 1, 1)
    return date(year, month, 1), date(year, month + 1, 1)


def get_schedule(db: Session, schedule_id: int) -> Schedule:
    schedule = db.get(Schedule, schedule_id)
    if not schedule:
        raise AppError(ErrorKind.not_found, "Schedule not found")
    return schedule


def get_schedule_detail(db: Session, schedule_id: int) -> Schedule:
    """Schedule with its creator and participants (oldest participation first)."""
    schedule = (
        db.query(Schedule)
        .options(
            joinedload(Schedule.creator),
            selectinload(Schedule.participations).joinedload(Participation.user),
        )
        .filter(Schedule.id == schedule_id)
        .first()
    )
    if not schedule:
        raise AppError(ErrorKind.not_found, "Schedule not found")
    return schedule


def list_schedules(
    db: Session,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> list[tuple[Schedule, int, int]]:
    """All schedules (optionally one year or one month) with participant/confirmed counts.

    The month filter only applies together with a year.
    """
    counts = (
        db.query(
            Participation.schedule_id.label("schedule_id"),
            func.count(Participation.user_id).label("participant_count"),
            func.count(Participation.user_id)
            .filter(Participation.status == ParticipationStatus.attending)
            .label("confirmed_count"),
        )
        .group_by(Participation.schedule_id)
        .subquery()
    )

    query = (
        db.query(
            Schedule,
            func.coalesce(counts.c.participant_count, 0),
            func.coalesce(counts.c.confirmed_count, 0),
        )
        .outerjoin(counts, counts.c.schedule_id == Schedule.id)
        .options(joinedload(Schedule.creator))
    )
    if year is not None:
        start, end = _month_range(year, month)
        query = query.filter(and_(Schedule.date >= start, Schedule.date < end))

    rows = query.order_by(Schedule.date.asc(), Schedule.start_time.asc(), Schedule.id.asc()).all()
    return [(schedule, int(total), int(confirmed)) for schedule, total, confirmed in rows]


def list_my_participations(db: Session, user_id: int) -> list[tuple[Schedule, ParticipationStatus]]:
    """Every schedule the user has a participation row for, with their own status."""
    rows = (
        db.query(Schedule, Participation.status)
        .join(Participation, Participation.schedule_id == Schedule.id)
        .options(joinedload(Schedule.creator))
        .filter(Participation.user_id == user_id)
        .order_by(Schedule.date.asc(), Schedule.start_time.asc(), Schedule.id.asc())
        .all()
    )
    return [(schedule, status) for schedule, status in rows]


def create_schedule(db: Session, fields: dict[str, Any], owner: User) -> Schedule:
    _check_time_window(fields["start_time"], fields["end_time"])

    schedule = Schedule(creator=owner, **{name: fields.get(name) for name in EDITABLE_FIELDS})
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    logger.info("Created schedule '%s' (%s) on %s by user %s", schedule.title, schedule.id, schedule.date, owner.id)
    return schedule


def update_schedule(db: Session, schedule_id: int, fields: dict[str, Any], acting_user: User) -> Schedule:
    """Replace all editable fields; omitted optional fields are cleared."""
    schedule = get_schedule(db, schedule_id)
    _check_authorization(schedule, acting_user, "update")
    _check_time_window(fields["start_time"], fields["end_time"])

    for name in EDITABLE_FIELDS:
        setattr(schedule, name, fields.get(name))

    db.commit()
    db.refresh(schedule)
    logger.info("Updated schedule %s by user %s", schedule_id, acting_user.id)
    return schedule


def delete_schedule(db: Session, schedule_id: int, acting_user: User) -> str:
    """Delete a schedule and its participations; returns the deleted title."""
    schedule = get_schedule(db, schedule_id)
    _check_authorization(schedule, acting_user, "delete")

    title = schedule.title
    db.delete(schedule)
    db.commit()
    logger.info("Deleted schedule %s ('%s') by user %s", schedule_id, title, acting_user.id)
    return title
