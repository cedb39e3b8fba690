"""Schedule ORM model: a single meetup owned by its creator."""
from sqlalchemy import Column, String, Text, Date, Time, DateTime, Integer, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.participation import ParticipationStatus


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    location = Column(String(500), nullable=True)
    location_detail = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    creator = relationship("User", back_populates="schedules")
    participations = relationship(
        "Participation",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="[Participation.created_at, Participation.user_id]",
    )

    @property
    def created_by_name(self):
        return self.creator.name if self.creator else None

    @property
    def participants(self):
        return self.participations

    @property
    def participant_count(self) -> int:
        return len(self.participations)

    @property
    def confirmed_count(self) -> int:
        return sum(1 for p in self.participations if p.status == ParticipationStatus.attending)
