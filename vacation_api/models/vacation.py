"""Vacation request model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from vacation_api.database import Base
from vacation_api.models.enums import VacationStatus


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the naive DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class VacationStatusDefinition(Base):
    """Lookup row naming a vacation status."""
    __tablename__ = "vacations_status"

    id = Column(Integer, primary_key=True)
    status = Column(String, nullable=False)


class Vacation(Base):
    """Represents a vacation request made by a user."""
    __tablename__ = "vacations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date_from = Column(Date, nullable=False)
    date_to = Column(Date, nullable=False)
    reason = Column(String, nullable=False)
    status_id = Column(
        Integer,
        ForeignKey("vacations_status.id"),
        nullable=False,
        default=VacationStatus.PENDING.value,
    )
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)
