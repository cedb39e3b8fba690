"""Pydantic schemas for Schedules and their participants."""
from __future__ import annotations
import datetime as dt
from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from app.models.participation import ParticipationStatus
from app.schemas.common import CamelModel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Location = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class ScheduleIn(CamelModel):
    """Body for both create and update; update replaces every editable field."""

    title: Title
    description: Optional[str] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Optional[Location] = None
    location_detail: Optional[str] = None


class ScheduleOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Optional[str] = None
    location_detail: Optional[str] = None
    created_by: int
    created_by_name: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class ScheduleSummary(ScheduleOut):
    participant_count: int = 0
    confirmed_count: int = 0


class ParticipantOut(CamelModel):
    user_id: int
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    status: ParticipationStatus
    created_at: Optional[dt.datetime] = None


class ScheduleDetail(ScheduleSummary):
    participants: list[ParticipantOut] = Field(default_factory=list)


class MyParticipationOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Optional[str] = None
    location_detail: Optional[str] = None
    created_by_name: Optional[str] = None
    my_status: ParticipationStatus
