"""Participation ORM model: one user's attendance intent for one schedule."""
import enum
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class ParticipationStatus(str, enum.Enum):
    attending = "Attending"
    not_attending = "NotAttending"
    undecided = "Undecided"


class Participation(Base):
    __tablename__ = "schedule_participants"

    # (schedule_id, user_id) is the key: one row per pair, status updated in place
    schedule_id = Column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    status = Column(
        SAEnum(ParticipationStatus, values_callable=lambda e: [m.value for m in e], name="participation_status"),
        nullable=False,
        default=ParticipationStatus.undecided,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    schedule = relationship("Schedule", back_populates="participations")
    user = relationship("User", back_populates="participations")

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def user_phone(self):
        return self.user.phone if self.user else None
