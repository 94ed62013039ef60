"""Database models."""

# Import all models here so metadata.create_all sees every table
from registry_identity.models.package import Follow, OwnerKind, Package, PackageOwner, Version
from registry_identity.models.user import Email, User

__all__ = [
    "User",
    "Email",
    "Package",
    "PackageOwner",
    "OwnerKind",
    "Follow",
    "Version",
]
