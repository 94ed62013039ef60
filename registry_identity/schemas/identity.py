"""Request and response schemas for account identity endpoints."""

from datetime import datetime

from pydantic import BaseModel


# Request schemas
class UserEmailUpdate(BaseModel):
    """Fields of a user that can be changed through PUT /users/{id}."""

    email: str | None = None


class UserUpdateRequest(BaseModel):
    """Body of PUT /users/{id}: {"user": {"email": ...}}."""

    user: UserEmailUpdate


class PackageEmailNotification(BaseModel):
    """Desired notification flag for one owned package."""

    id: int
    email_notifications: bool


# Response schemas
class OkResponse(BaseModel):
    """Acknowledgement returned by every mutation."""

    ok: bool = True


class PrivateUserResponse(BaseModel):
    """The caller's own account, including private email state."""

    id: int
    login: str
    name: str | None = None
    avatar: str | None = None
    email: str | None = None
    email_verified: bool
    email_verification_sent: bool
    url: str | None = None


class OwnedPackageResponse(BaseModel):
    """A package owned by the caller and its notification flag."""

    id: int
    name: str
    email_notifications: bool


class MeResponse(BaseModel):
    """GET /me response."""

    user: PrivateUserResponse
    owned_packages: list[OwnedPackageResponse]


class PublisherResponse(BaseModel):
    """Public view of the user that published a version."""

    id: int
    login: str
    name: str | None = None
    avatar: str | None = None


class VersionResponse(BaseModel):
    """A published version in the update feed."""

    id: int
    package: str
    num: str
    created_at: datetime
    yanked: bool
    license: str | None = None
    downloads: int
    published_by: PublisherResponse | None = None


class UpdatesMeta(BaseModel):
    more: bool


class UpdatesResponse(BaseModel):
    """GET /me/updates response."""

    versions: list[VersionResponse]
    meta: UpdatesMeta
