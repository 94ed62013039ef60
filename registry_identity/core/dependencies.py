"""FastAPI dependencies for resolving the authenticated identity."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from registry_identity.core.app_exceptions import AuthenticationError
from registry_identity.core.security import verify_access_token
from registry_identity.db.session import get_db
from registry_identity.models.user import User


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, passed explicitly into every core operation."""

    id: int
    login: str


def get_current_identity(
    authorization: Annotated[str | None, Header()] = None,
    db: Session = Depends(get_db),
) -> Identity:
    """Dependency to get the current authenticated identity from a JWT."""
    if not authorization:
        raise AuthenticationError("Authorization header missing")

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid authorization scheme")
    except ValueError:
        raise AuthenticationError(
            "Invalid authorization header format. Expected: Bearer <token>"
        ) from None

    try:
        payload = verify_access_token(token)
        user_id = int(payload["sub"])
    except Exception as e:
        raise AuthenticationError(f"Invalid or expired token: {e}") from e

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")

    return Identity(id=user.id, login=user.login)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
