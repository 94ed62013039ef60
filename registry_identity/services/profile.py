"""Profile and update feed assembly (read-only)."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from registry_identity.common.pagination import PaginationParams, paginate
from registry_identity.core.app_exceptions import NotFoundError, store_error
from registry_identity.core.dependencies import Identity
from registry_identity.models.package import Follow, OwnerKind, Package, PackageOwner, Version
from registry_identity.models.user import Email, User
from registry_identity.schemas.identity import (
    MeResponse,
    OwnedPackageResponse,
    PrivateUserResponse,
    PublisherResponse,
    UpdatesMeta,
    UpdatesResponse,
    VersionResponse,
)


def get_profile(db: Session, identity: Identity) -> MeResponse:
    """The caller's account with email state and owned packages.

    ``email_verification_sent`` is true once any token has been generated,
    whether or not it was delivered or confirmed.
    """
    try:
        row = db.execute(
            select(
                User,
                Email.verified,
                Email.email,
                Email.token_generated_at.is_not(None),
            )
            .outerjoin(Email, Email.user_id == User.id)
            .where(User.id == identity.id)
        ).first()

        if row is None:
            raise NotFoundError("User not found")

        owned = db.execute(
            select(Package.id, Package.name, PackageOwner.email_notifications)
            .join(PackageOwner, PackageOwner.package_id == Package.id)
            .where(
                PackageOwner.owner_id == identity.id,
                PackageOwner.owner_kind == OwnerKind.USER.value,
                PackageOwner.deleted.is_(False),
            )
            .order_by(Package.name.asc())
        ).all()
    except SQLAlchemyError as exc:
        raise store_error(exc) from exc

    user, verified, email, token_generated = row
    verified = bool(verified)

    return MeResponse(
        user=PrivateUserResponse(
            id=user.id,
            login=user.login,
            name=user.name,
            avatar=user.avatar,
            email=email,
            email_verified=verified,
            email_verification_sent=verified or bool(token_generated),
            url=f"/users/{user.login}",
        ),
        owned_packages=[
            OwnedPackageResponse(id=pkg_id, name=name, email_notifications=flag)
            for pkg_id, name, flag in owned
        ],
    )


def get_update_feed(db: Session, identity: Identity, params: PaginationParams) -> UpdatesResponse:
    """Newest versions of the packages the caller follows, one page at a time."""
    publisher = aliased(User)
    followed = select(Follow.package_id).where(Follow.user_id == identity.id)
    stmt = (
        select(Version, Package.name, publisher)
        .join(Package, Package.id == Version.package_id)
        .outerjoin(publisher, publisher.id == Version.published_by)
        .where(Version.package_id.in_(followed))
        .order_by(Version.created_at.desc(), Version.id.desc())
    )

    try:
        page = paginate(db, stmt, params)
    except SQLAlchemyError as exc:
        raise store_error(exc) from exc

    return UpdatesResponse(
        versions=[
            VersionResponse(
                id=version.id,
                package=package_name,
                num=version.num,
                created_at=version.created_at,
                yanked=version.yanked,
                license=version.license,
                downloads=version.downloads,
                published_by=(
                    PublisherResponse(
                        id=published_by.id,
                        login=published_by.login,
                        name=published_by.name,
                        avatar=published_by.avatar,
                    )
                    if published_by is not None
                    else None
                ),
            )
            for version, package_name, published_by in page.items
        ],
        meta=UpdatesMeta(more=page.more),
    )
