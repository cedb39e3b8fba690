"""Identity store: user creation, lookup, approval and admin edits.

Rules enforced here (before any write):
- phone numbers are unique after hyphen normalization
- the first user in an empty store is approved and admin
- an admin cannot revoke, demote or delete themselves, and cannot revoke another admin
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import AppError, ErrorKind
from app.models.user import AdminBootstrap, BOOTSTRAP_CLAIM_ID, User
from app.schemas.common import normalize_phone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserPatch:
    """Admin edit of a user. ``None`` means "leave unchanged"."""

    name: Optional[str] = None
    phone: Optional[str] = None
    is_approved: Optional[bool] = None
    is_admin: Optional[bool] = None

    def is_empty(self) -> bool:
        return self.name is None and self.phone is None and self.is_approved is None and self.is_admin is None


def _phone_taken(db: Session, phone: str, exclude_user_id: Optional[int] = None) -> bool:
    query = db.query(User.id).filter(User.phone == phone)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise AppError(ErrorKind.not_found, "User not found")
    return user


def get_by_credentials(db: Session, name: str, phone: str) -> User:
    user = (
        db.query(User)
        .filter(User.name == name, User.phone == normalize_phone(phone))
        .first()
    )
    if not user:
        raise AppError(ErrorKind.not_found, "Name or phone number is incorrect")
    return user


def create_user(db: Session, name: str, phone: str, auto_approve: bool = False) -> User:
    """Register a user; the first one in an empty store becomes an approved admin.

    The bootstrap claim row is inserted in the same transaction as the user,
    so of two concurrent "first" registrations only one commits as admin. The
    other hits the claim's primary key and is retried as an ordinary user.
    """
    phone = normalize_phone(phone)
    claim_bootstrap = True

    for _ in range(2):
        if _phone_taken(db, phone):
            raise AppError(ErrorKind.duplicate_phone, "This phone number is already registered")

        is_first = claim_bootstrap and db.query(func.count(User.id)).scalar() == 0
        user = User(
            name=name,
            phone=phone,
            is_approved=auto_approve or is_first,
            is_admin=is_first,
        )
        if is_first:
            db.add(AdminBootstrap(id=BOOTSTRAP_CLAIM_ID))
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if _phone_taken(db, phone):
                raise AppError(ErrorKind.duplicate_phone, "This phone number is already registered")
            if not is_first:
                raise
            logger.warning("Bootstrap admin already claimed; registering %s as a regular user", phone)
            claim_bootstrap = False
            continue
        db.refresh(user)
        logger.info(
            "Registered user %s (%s) approved=%s admin=%s",
            user.id, user.name, user.is_approved, user.is_admin,
        )
        return user

    raise AppError(ErrorKind.conflict, "Registration could not be completed, please retry")


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def list_pending(db: Session) -> list[User]:
    """Users waiting for approval, oldest first."""
    return (
        db.query(User)
        .filter(User.is_approved.is_(False))
        .order_by(User.created_at.asc(), User.id.asc())
        .all()
    )


def approve_user(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if user.is_approved:
        raise AppError(ErrorKind.validation_error, "User is already approved")

    user.is_approved = True
    db.commit()
    db.refresh(user)
    logger.info("Approved user %s (%s)", user.id, user.name)
    return user


def revoke_user(db: Session, user_id: int, acting_user: User) -> User:
    if user_id == acting_user.id:
        raise AppError(ErrorKind.validation_error, "You cannot revoke your own approval")

    user = get_user(db, user_id)
    if user.is_admin:
        raise AppError(ErrorKind.validation_error, "An administrator's approval cannot be revoked")

    user.is_approved = False
    db.commit()
    db.refresh(user)
    logger.info("Revoked approval of user %s (%s) by admin %s", user.id, user.name, acting_user.id)
    return user


def update_user(db: Session, user_id: int, patch: UserPatch, acting_user: User) -> User:
    """Apply only the fields present in ``patch``."""
    if user_id == acting_user.id:
        if patch.is_admin is not None:
            raise AppError(ErrorKind.validation_error, "You cannot change your own admin privileges")
        if patch.is_approved is False:
            raise AppError(ErrorKind.validation_error, "You cannot revoke your own approval")

    user = get_user(db, user_id)
    if user.is_admin and patch.is_approved is False and patch.is_admin is not False:
        raise AppError(ErrorKind.validation_error, "An administrator's approval cannot be revoked")

    if patch.is_empty():
        raise AppError(ErrorKind.no_fields_to_update, "No fields to update")

    phone = normalize_phone(patch.phone) if patch.phone is not None else None
    if phone is not None and phone != user.phone and _phone_taken(db, phone, exclude_user_id=user.id):
        raise AppError(ErrorKind.duplicate_phone, "This phone number is already in use")

    if patch.name is not None:
        user.name = patch.name
    if phone is not None:
        user.phone = phone
    if patch.is_approved is not None:
        user.is_approved = patch.is_approved
    if patch.is_admin is not None:
        user.is_admin = patch.is_admin

    db.commit()
    db.refresh(user)
    logger.info("Updated user %s by admin %s", user.id, acting_user.id)
    return user


def delete_user(db: Session, user_id: int, acting_user: User) -> str:
    """Delete a user together with their schedules and participations; returns their name."""
    if user_id == acting_user.id:
        raise AppError(ErrorKind.validation_error, "You cannot delete your own account")

    user = get_user(db, user_id)
    name = user.name
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s (%s) by admin %s", user_id, name, acting_user.id)
    return name
