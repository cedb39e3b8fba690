"""Participation ledger: one status row per (schedule, user), upserted in place."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import AppError, ErrorKind
from app.models.participation import Participation, ParticipationStatus
from app.models.user import User
from app.services.schedule_service import get_schedule

logger = logging.getLogger(__name__)


def _approved_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user or not user.is_approved:
        raise AppError(ErrorKind.not_found, "Approved user not found")
    return user


def _upsert(db: Session, schedule_id: int, user: User, status: ParticipationStatus) -> Participation:
    schedule = get_schedule(db, schedule_id)

    participation = db.get(Participation, (schedule.id, user.id))
    if participation:
        participation.status = status
        db.commit()
        return participation

    participation = Participation(schedule=schedule, user=user, status=status)
    db.add(participation)
    try:
        db.commit()
    except IntegrityError:
        # Same pair inserted concurrently: update that row instead
        db.rollback()
        participation = db.get(Participation, (schedule_id, user.id))
        if not participation:
            raise
        participation.status = status
        db.commit()
    return participation


def set_status(db: Session, schedule_id: int, user: User, status: ParticipationStatus) -> Participation:
    """Insert or update the acting user's status for a schedule."""
    participation = _upsert(db, schedule_id, user, status)
    logger.info("User %s set status %s on schedule %s", user.id, status.value, schedule_id)
    return participation


def withdraw(db: Session, schedule_id: int, user: User) -> None:
    get_schedule(db, schedule_id)

    participation = db.get(Participation, (schedule_id, user.id))
    if not participation:
        raise AppError(ErrorKind.not_found, "Participation not found")

    db.delete(participation)
    db.commit()
    logger.info("User %s withdrew from schedule %s", user.id, schedule_id)


def set_status_for(
    db: Session,
    schedule_id: int,
    target_user_id: int,
    status: ParticipationStatus,
    acting_user: User,
) -> Participation:
    """Admin sets another member's status; the member must be approved."""
    get_schedule(db, schedule_id)
    target = _approved_user(db, target_user_id)

    participation = _upsert(db, schedule_id, target, status)
    logger.info(
        "Admin %s set status %s for user %s on schedule %s",
        acting_user.id, status.value, target.id, schedule_id,
    )
    return participation


def remove_participant(db: Session, schedule_id: int, target_user_id: int, acting_user: User) -> str:
    """Admin removes a member from a schedule; returns the member's name."""
    get_schedule(db, schedule_id)
    target = _approved_user(db, target_user_id)

    participation = db.get(Participation, (schedule_id, target.id))
    if not participation:
        raise AppError(ErrorKind.not_found, "This user is not participating in the schedule")

    name = target.name
    db.delete(participation)
    db.commit()
    logger.info("Admin %s removed user %s from schedule %s", acting_user.id, target.id, schedule_id)
    return name
