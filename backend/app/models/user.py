"""User ORM model: identity record with approval and admin flags."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False, unique=True)  # digits only, e.g. 01012345678
    is_approved = Column(Boolean, nullable=False, default=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    schedules = relationship("Schedule", back_populates="creator", cascade="all, delete-orphan")
    participations = relationship("Participation", back_populates="user", cascade="all, delete-orphan")


class AdminBootstrap(Base):
    """Single-row claim taken in the same transaction as the first user's insert.

    Two registrations racing on an empty store both try to insert row 1; the
    loser gets an IntegrityError and is retried as an ordinary registration.
    """

    __tablename__ = "admin_bootstrap"

    id = Column(Integer, primary_key=True, autoincrement=False)
    claimed_at = Column(DateTime(timezone=True), server_default=func.now())


BOOTSTRAP_CLAIM_ID = 1
