"""Package, ownership, follow and version models."""

from enum import IntEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    false,
    true,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from registry_identity.db.base import Base


class OwnerKind(IntEnum):
    """Discriminates individual-user ownership from team ownership."""

    USER = 0
    TEAM = 1


class Package(Base):
    """Published package."""

    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    versions = relationship("Version", back_populates="package", cascade="all, delete-orphan")


class PackageOwner(Base):
    """Owner of a package (user or team) with its notification preference."""

    __tablename__ = "package_owners"

    package_id = Column(
        Integer, ForeignKey("packages.id", ondelete="CASCADE"), primary_key=True
    )
    owner_id = Column(Integer, primary_key=True)  # users.id or teams.id, per owner_kind
    owner_kind = Column(Integer, primary_key=True, default=OwnerKind.USER.value)
    email_notifications = Column(Boolean, nullable=False, default=True, server_default=true())
    deleted = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_package_owners_owner", "owner_id", "owner_kind"),
    )


class Follow(Base):
    """A user tracking a package for the update feed."""

    __tablename__ = "follows"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    package_id = Column(
        Integer, ForeignKey("packages.id", ondelete="CASCADE"), primary_key=True
    )


class Version(Base):
    """Immutable published version of a package."""

    __tablename__ = "versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_id = Column(
        Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    num = Column(String, nullable=False)
    license = Column(String, nullable=True)
    downloads = Column(Integer, nullable=False, default=0, server_default="0")
    yanked = Column(Boolean, nullable=False, default=False, server_default=false())
    published_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    package = relationship("Package", back_populates="versions")
    publisher = relationship("User")

    __table_args__ = (
        UniqueConstraint("package_id", "num", name="uq_versions_package_num"),
        Index("ix_versions_created_at", "created_at"),
    )
