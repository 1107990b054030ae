"""
User model with secure password storage.

Roles are assigned at creation; registration always produces USER accounts.
"""

import enum

from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship

from deskbook.db.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, native_enum=False, length=10, create_constraint=True, name="user_role"),
        nullable=False,
        default=UserRole.USER,
    )

    reservations = relationship("Reservation", back_populates="user", lazy="raise")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
