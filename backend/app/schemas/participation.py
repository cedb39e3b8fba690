"""Pydantic schemas for participation status changes."""
from typing import Optional

from app.models.participation import ParticipationStatus
from app.schemas.common import CamelModel


class StatusIn(CamelModel):
    status: ParticipationStatus  # Attending | NotAttending | Undecided


class ParticipationOut(CamelModel):
    schedule_id: int
    user_id: int
    user_name: Optional[str] = None
    status: Optional[ParticipationStatus] = None
