"""Email change, resend and confirmation endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from registry_identity.core.dependencies import CurrentIdentity
from registry_identity.db.session import get_db
from registry_identity.schemas.identity import OkResponse
from registry_identity.services.verification import (
    change_email,
    confirm_email,
    ensure_same_user,
    parse_email_update,
    resend_confirmation,
)

router = APIRouter(tags=["Users"])


@router.put(
    "/users/{user_id}",
    response_model=OkResponse,
    summary="Change email address",
    description="Replace the account's email address and send a new confirmation link.",
)
def update_user(
    user_id: int,
    identity: CurrentIdentity,
    payload: Any = Body(...),
    db: Session = Depends(get_db),
) -> OkResponse:
    ensure_same_user(identity, user_id)
    return change_email(db, identity, user_id, parse_email_update(payload))


@router.put(
    "/users/{user_id}/resend",
    response_model=OkResponse,
    summary="Resend confirmation email",
)
def regenerate_token_and_send(
    user_id: int,
    identity: CurrentIdentity,
    db: Session = Depends(get_db),
) -> OkResponse:
    return resend_confirmation(db, identity, user_id)


@router.put(
    "/confirm/{email_token}",
    response_model=OkResponse,
    summary="Confirm email address",
    description="Mark the email that holds this token as verified. Safe to repeat.",
)
def confirm_user_email(email_token: str, db: Session = Depends(get_db)) -> OkResponse:
    return confirm_email(db, email_token)
