"""Per-package email notification preference sync."""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from registry_identity.core.app_exceptions import invalid_request, store_error
from registry_identity.core.dependencies import Identity
from registry_identity.core.logging import get_logger
from registry_identity.db.upsert import upsert
from registry_identity.models.package import OwnerKind, PackageOwner
from registry_identity.schemas.identity import OkResponse, PackageEmailNotification

logger = get_logger(__name__)

_payload_adapter = TypeAdapter(list[PackageEmailNotification])


@dataclass(frozen=True)
class OwnerRow:
    """One ownership row as read from, or written to, ``package_owners``."""

    package_id: int
    owner_id: int
    owner_kind: int
    email_notifications: bool


def parse_notification_updates(payload: Any) -> dict[int, bool]:
    """Parse ``[{"id": ..., "email_notifications": ...}]`` into a mapping.

    When a package id appears more than once the last entry wins.
    """
    try:
        items = _payload_adapter.validate_python(payload)
    except PydanticValidationError as exc:
        raise invalid_request(exc) from exc
    return {item.id: item.email_notifications for item in items}


def build_candidate_rows(
    current_rows: Iterable[OwnerRow], updates: Mapping[int, bool]
) -> list[OwnerRow]:
    """Merge a partial update into the full set of owned rows.

    Every current row yields exactly one candidate: packages named in
    ``updates`` take the submitted flag, all others keep their stored one.
    Ids in ``updates`` without a current row are dropped.
    """
    return [
        OwnerRow(
            package_id=row.package_id,
            owner_id=row.owner_id,
            owner_kind=row.owner_kind,
            email_notifications=updates.get(row.package_id, row.email_notifications),
        )
        for row in current_rows
    ]


def load_user_owner_rows(db: Session, user_id: int) -> list[OwnerRow]:
    """Live user-kind ownership rows of ``user_id``; team rows are excluded."""
    rows = db.execute(
        select(
            PackageOwner.package_id,
            PackageOwner.owner_id,
            PackageOwner.owner_kind,
            PackageOwner.email_notifications,
        ).where(
            PackageOwner.owner_id == user_id,
            PackageOwner.owner_kind == OwnerKind.USER.value,
            PackageOwner.deleted.is_(False),
        )
    ).all()
    return [OwnerRow(*row) for row in rows]


def apply_candidate_rows(db: Session, rows: list[OwnerRow]) -> None:
    """Write candidate rows in one upsert keyed by (package, owner, kind)."""
    if not rows:
        return
    stmt = upsert(
        db,
        PackageOwner,
        index_elements=["package_id", "owner_id", "owner_kind"],
        update_columns=["email_notifications"],
    )
    db.execute(
        stmt.values(
            [
                {
                    "package_id": row.package_id,
                    "owner_id": row.owner_id,
                    "owner_kind": row.owner_kind,
                    "email_notifications": row.email_notifications,
                }
                for row in rows
            ]
        )
    )


def sync_email_notifications(db: Session, identity: Identity, payload: Any) -> OkResponse:
    """Apply a client's partial notification preferences for owned packages."""
    updates = parse_notification_updates(payload)

    try:
        current = load_user_owner_rows(db, identity.id)
        candidates = build_candidate_rows(current, updates)
        apply_candidate_rows(db, candidates)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise store_error(exc) from exc

    logger.info(
        "Email notification preferences synced",
        extra={
            "user_id": identity.id,
            "owned_packages": len(candidates),
            "submitted": len(updates),
        },
    )
    return OkResponse()
