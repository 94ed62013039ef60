"""Endpoints for the caller's own account: profile, feed, preferences."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from registry_identity.common.pagination import PaginationParams, pagination_params
from registry_identity.core.dependencies import CurrentIdentity
from registry_identity.db.session import get_db
from registry_identity.schemas.identity import MeResponse, OkResponse, UpdatesResponse
from registry_identity.services.notification_prefs import sync_email_notifications
from registry_identity.services.profile import get_profile, get_update_feed

router = APIRouter(prefix="/me", tags=["Me"])


@router.get(
    "",
    response_model=MeResponse,
    summary="Get own profile",
    description="Account details, email verification state and owned packages.",
)
def read_me(identity: CurrentIdentity, db: Session = Depends(get_db)) -> MeResponse:
    return get_profile(db, identity)


@router.get(
    "/updates",
    response_model=UpdatesResponse,
    summary="Get update feed",
    description="New versions of followed packages, newest first.",
)
def read_updates(
    identity: CurrentIdentity,
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
) -> UpdatesResponse:
    return get_update_feed(db, identity, pagination)


@router.put(
    "/email_notifications",
    response_model=OkResponse,
    summary="Update email notification preferences",
    description=(
        "Set email_notifications for owned packages. Packages left out keep "
        "their current value; packages not owned by the caller are ignored."
    ),
)
def update_email_notifications(
    identity: CurrentIdentity,
    payload: Any = Body(...),
    db: Session = Depends(get_db),
) -> OkResponse:
    return sync_email_notifications(db, identity, payload)
