"""FastAPI dependency — bearer token auth for users and admins."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from smartwatt.application.services.auth_service import ROLE_ADMIN, ROLE_USER, decode_access_token
from smartwatt.core.exceptions import ForbiddenException, UnauthorizedException
from smartwatt.domain.models.admin import Admin
from smartwatt.domain.models.user import User
from smartwatt.interfaces.deps import get_admin_repository, get_user_repository
from smartwatt.infrastructure.repositories.user_repository import (
    SQLAlchemyAdminRepository,
    SQLAlchemyUserRepository,
)

security = HTTPBearer(auto_error=False)


def _decode(credentials: Optional[HTTPAuthorizationCredentials]) -> tuple[int, str]:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Access token missing")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    try:
        subject_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedException("Invalid token")
    return subject_id, payload.get("role", ROLE_USER)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
) -> User:
    """Extract and validate the current user from the JWT."""
    subject_id, role = _decode(credentials)
    if role != ROLE_USER:
        raise UnauthorizedException("Invalid token")

    user = users.get_by_id(subject_id)
    if user is None:
        raise UnauthorizedException("User not found")
    return user


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    admins: SQLAlchemyAdminRepository = Depends(get_admin_repository),
) -> Admin:
    """Require a valid admin token."""
    subject_id, role = _decode(credentials)
    if role != ROLE_ADMIN:
        raise ForbiddenException("Forbidden: Admins only")

    admin = admins.get_by_id(subject_id)
    if admin is None:
        raise UnauthorizedException("Admin not found")
    return admin
