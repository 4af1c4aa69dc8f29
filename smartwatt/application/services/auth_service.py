"""Auth service — password hashing, JWT tokens, user and admin accounts."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from smartwatt.config import get_settings
from smartwatt.core.exceptions import ConflictException, UnauthorizedException
from smartwatt.domain.models.admin import Admin
from smartwatt.domain.models.user import User
from smartwatt.domain.schemas.auth import AdminCreate, UserCreate, UserUpdate
from smartwatt.infrastructure.repositories.user_repository import (
    SQLAlchemyAdminRepository,
    SQLAlchemyUserRepository,
)

logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode = {"sub": str(subject_id), "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def register_user(repo: SQLAlchemyUserRepository, body: UserCreate) -> User:
    if repo.email_taken(body.email):
        raise ConflictException("A user with this email already exists")

    with repo.atomic():
        user = repo.create({
            "user_name": body.user_name,
            "email": body.email,
            "password_hash": hash_password(body.password),
            "budget": body.budget,
            "min_budget": 0,
            "total_wattage": 0,
        })
    logger.info("User registered", user_id=user.id)
    return repo.refresh(user)


def authenticate_user(repo: SQLAlchemyUserRepository, email: str, password: str) -> User:
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedException("Invalid credentials")
    return user


def update_user(repo: SQLAlchemyUserRepository, user: User, body: UserUpdate) -> User:
    """Apply only the fields present in the request."""
    patch = body.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in patch and repo.email_taken(patch["email"], exclude_id=user.id):
        raise ConflictException("A user with this email already exists")
    if "password" in patch:
        patch["password_hash"] = hash_password(patch.pop("password"))

    with repo.atomic():
        repo.update(user, patch)
    logger.info("User updated", user_id=user.id, fields=sorted(patch))
    return repo.refresh(user)


def update_budget(repo: SQLAlchemyUserRepository, user: User, budget: float) -> User:
    with repo.atomic():
        repo.update(user, {"budget": budget})
    logger.info("Budget updated", user_id=user.id, budget=budget)
    return repo.refresh(user)


def delete_user(repo: SQLAlchemyUserRepository, user: User) -> None:
    """Remove the account; its home devices go with it."""
    user_id = user.id
    with repo.atomic():
        repo.delete(user)
    logger.info("User deleted", user_id=user_id)


def register_admin(repo: SQLAlchemyAdminRepository, body: AdminCreate) -> Admin:
    if repo.get_by_email(body.email):
        raise ConflictException("An admin with this email already exists")

    with repo.atomic():
        admin = repo.create({
            "email": body.email,
            "password_hash": hash_password(body.password),
        })
    logger.info("Admin registered", admin_id=admin.id)
    return repo.refresh(admin)


def authenticate_admin(repo: SQLAlchemyAdminRepository, email: str, password: str) -> Admin:
    admin = repo.get_by_email(email)
    if not admin or not verify_password(password, admin.password_hash):
        raise UnauthorizedException("Invalid credentials")
    return admin
