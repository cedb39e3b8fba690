"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional

from app.schemas.common import CamelModel, Name, Phone


class UserUpdate(CamelModel):
    """Admin edit; every field is optional and only supplied fields change."""

    name: Optional[Name] = None
    phone: Optional[Phone] = None
    is_approved: Optional[bool] = None
    is_admin: Optional[bool] = None


class UserOut(CamelModel):
    id: int
    name: str
    phone: str
    is_approved: bool
    is_admin: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PendingUserOut(CamelModel):
    id: int
    name: str
    phone: str
    created_at: Optional[datetime] = None
