"""User model definitions."""

from sqlalchemy import Column, Integer, String
from vacation_api.database import Base
from vacation_api.models.enums import UserRole


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    employ_code = Column(String, nullable=True)
    roles_id = Column(Integer, nullable=False, default=UserRole.USER.value)
    password = Column(String, nullable=False)  # bcrypt hash
