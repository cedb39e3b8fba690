"""Pydantic schemas for registration, login and the current session."""
from typing import Optional

from app.schemas.common import CamelModel, Name, Phone


class Credentials(CamelModel):
    name: Name
    phone: Phone  # 010-XXXX-XXXX, stored without hyphens


class MeOut(CamelModel):
    user_id: int
    name: str
    phone: str
    is_approved: bool
    is_admin: bool


class SessionOut(MeOut):
    token: Optional[str] = None
