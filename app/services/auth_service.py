"""Request identity for the report API.

Identity currently arrives as a bare ``user-id`` header. Everything that needs
the caller depends on :func:`get_optional_principal` (or the wrappers below),
so a real session or token scheme can replace it through
``app.dependency_overrides`` without touching the routes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from .errors import AuthenticationRequiredError, InternalServiceError, OwnershipError

logger = logging.getLogger(__name__)

# Header value some clients send when they have no identity yet.
PLACEHOLDER_HEADER_VALUE = "placeholder-user-id"


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    user_id: UUID
    is_placeholder: bool = False


def principal_from_header(raw: str | None) -> AuthenticatedPrincipal | None:
    """Parse the ``user-id`` header; ``None`` when no identity was supplied."""

    value = (raw or "").strip()
    if not value or value == PLACEHOLDER_HEADER_VALUE:
        return None
    try:
        return AuthenticatedPrincipal(user_id=UUID(value))
    except ValueError as exc:
        raise AuthenticationRequiredError("Invalid user identity") from exc


async def get_optional_principal(
    user_id: str | None = Header(default=None, alias="user-id"),
) -> AuthenticatedPrincipal | None:
    return principal_from_header(user_id)


async def get_current_principal(
    principal: AuthenticatedPrincipal | None = Depends(get_optional_principal),
) -> AuthenticatedPrincipal:
    """Identity required for mutating a report."""

    if principal is None:
        raise AuthenticationRequiredError()
    return principal


async def get_reporting_principal(
    principal: AuthenticatedPrincipal | None = Depends(get_optional_principal),
) -> AuthenticatedPrincipal:
    """Identity for report creation; falls back to the placeholder reporter."""

    if principal is not None:
        return principal
    return AuthenticatedPrincipal(user_id=get_settings().placeholder_user_id, is_placeholder=True)


def require_roles(*allowed_roles: str):
    normalized = {role.lower() for role in allowed_roles if role}

    async def _resolver(
        principal: AuthenticatedPrincipal = Depends(get_current_principal),
        db: Session = Depends(get_session),
    ) -> User:
        try:
            user = db.get(User, principal.user_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load user %s", principal.user_id)
            raise InternalServiceError() from exc
        if user is None:
            raise AuthenticationRequiredError("Unknown user")
        role = (getattr(user, "role", None) or "user").lower()
        if normalized and role not in normalized:
            raise OwnershipError("Insufficient permissions")
        return user

    return _resolver


def require_admin():
    return require_roles("admin", "owner")


def ensure_placeholder_user(db: Session) -> User:
    """Create the placeholder reporter row when it does not exist yet."""

    settings = get_settings()
    user = db.get(User, settings.placeholder_user_id)
    if user is not None:
        return user

    user = User(id=settings.placeholder_user_id, username=settings.placeholder_username, email=None, role="user")
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # Another request inserted the row first.
        db.rollback()
        existing = db.get(User, settings.placeholder_user_id)
        if existing is None:
            logger.exception("Unable to create placeholder user %s", settings.placeholder_user_id)
            raise
        return existing
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Unable to create placeholder user %s", settings.placeholder_user_id)
        raise
    db.refresh(user)
    logger.info("Created placeholder reporter %s", user.id)
    return user


__all__ = [
    "PLACEHOLDER_HEADER_VALUE",
    "AuthenticatedPrincipal",
    "principal_from_header",
    "get_optional_principal",
    "get_current_principal",
    "get_reporting_principal",
    "require_roles",
    "require_admin",
    "ensure_placeholder_user",
]
