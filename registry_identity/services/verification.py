"""Email verification state machine.

States per user: no email row -> unverified (address, token) -> verified.
Every address change lands in "unverified" with a fresh token, so a token
only ever proves possession of the address it was generated for.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from registry_identity.core.app_exceptions import (
    AuthorizationError,
    EmailDeliveryError,
    NotFoundError,
    ValidationError,
    invalid_request,
    store_error,
)
from registry_identity.core.dependencies import Identity
from registry_identity.core.logging import get_logger
from registry_identity.core.security import generate_email_token
from registry_identity.db.upsert import upsert
from registry_identity.models.user import Email, User
from registry_identity.schemas.identity import OkResponse, UserUpdateRequest
from registry_identity.services.email.service import send_user_confirm_email

logger = get_logger(__name__)

_update_adapter = TypeAdapter(UserUpdateRequest)


def ensure_same_user(identity: Identity, user_id: int) -> None:
    """Reject operations on an account other than the caller's own."""
    if identity.id != user_id:
        logger.warning(
            "Identity mismatch",
            extra={"identity_id": identity.id, "target_user_id": user_id},
        )
        raise AuthorizationError("current user does not match requested user")


def parse_email_update(payload: Any) -> str | None:
    """Extract the submitted address from a ``{"user": {"email": ...}}`` body."""
    try:
        return _update_adapter.validate_python(payload).user.email
    except PydanticValidationError as exc:
        raise invalid_request(exc) from exc


def change_email(db: Session, identity: Identity, user_id: int, new_email: str | None) -> OkResponse:
    """Replace the user's address and issue a new confirmation token.

    The address and token are committed together; the confirmation email is
    sent afterwards and a delivery failure is only logged, since the caller
    can always ask for a resend.
    """
    ensure_same_user(identity, user_id)

    address = (new_email or "").strip()
    if not address:
        raise ValidationError("empty email rejected")

    row = {
        "user_id": identity.id,
        "email": address,
        "verified": False,
        "token": generate_email_token(),
        "token_generated_at": datetime.now(timezone.utc),
    }
    stmt = upsert(
        db,
        Email,
        index_elements=["user_id"],
        update_columns=["email", "verified", "token", "token_generated_at"],
    )

    try:
        db.execute(update(User).where(User.id == identity.id).values(email=address))
        token = db.execute(stmt.values(row).returning(Email.token)).scalar_one()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "Email change failed",
            extra={"user_id": identity.id, "error_type": type(exc).__name__},
        )
        raise store_error(exc) from exc

    logger.info("Email changed", extra={"user_id": identity.id})

    try:
        send_user_confirm_email(address, identity.login, token)
    except Exception as exc:
        logger.warning(
            "Confirmation email could not be sent",
            extra={"user_id": identity.id, "error": str(exc)},
        )

    return OkResponse()


def confirm_email(db: Session, token: str) -> OkResponse:
    """Mark the email holding ``token`` as verified (idempotent)."""
    try:
        result = db.execute(
            update(Email)
            .where(Email.token == token)
            .values(verified=True)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise store_error(exc) from exc

    if result.rowcount == 0:
        raise NotFoundError("Email belonging to token not found.")

    return OkResponse()


def resend_confirmation(db: Session, identity: Identity, user_id: int) -> OkResponse:
    """Rotate the user's token and send it again.

    The rotated token is committed before sending. Unlike ``change_email`` a
    delivery failure is reported, because delivery is the point of the call.
    """
    ensure_same_user(identity, user_id)

    try:
        email_row = db.execute(
            update(Email)
            .where(Email.user_id == identity.id)
            .values(token=generate_email_token(), token_generated_at=datetime.now(timezone.utc))
            .returning(Email.email, Email.token)
            .execution_options(synchronize_session=False)
        ).first()
        if email_row is None:
            db.rollback()
            raise NotFoundError("Email could not be found")
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise store_error(exc) from exc

    address, token = email_row
    try:
        send_user_confirm_email(address, identity.login, token)
    except Exception as exc:
        logger.error(
            "Confirmation email resend failed",
            extra={"user_id": identity.id, "error": str(exc)},
        )
        raise EmailDeliveryError("Error in sending email") from exc

    logger.info("Confirmation email resent", extra={"user_id": identity.id})
    return OkResponse()
