"""User and email models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from registry_identity.db.base import Base


class User(Base):
    """Registry account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    avatar = Column(String, nullable=True)
    # Denormalized copy of the current address, kept for profile display
    email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    email_record = relationship(
        "Email", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class Email(Base):
    """The single email record of a user, with its confirmation token."""

    __tablename__ = "emails"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    email = Column(String, nullable=False)
    verified = Column(Boolean, nullable=False, default=False, server_default=false())
    token = Column(String, nullable=False, unique=True, index=True)
    token_generated_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="email_record")
